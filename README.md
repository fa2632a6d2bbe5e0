# userhub

A small HTTP service that keeps a table of users in PostgreSQL and exposes
it over a JSON API: create users, search them by name and age, list them by
age and recording date, update them, and delete them either for good or
softly (marking them as deleted).

## Installation

```
pip install .
```

The database is reached through SQLAlchemy's `postgresql` dialect, so its
default PostgreSQL driver must be installed alongside; without it the
service cannot connect and stops at start-up.

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Configuration

By default the service reads `config/config.yaml`, relative to the
directory it is started from; another file can be given with `--config`.
If the file does not exist or cannot be parsed, the service logs the error
and exits with status 1.

```yaml
env: local

database:
  host: localhost
  port: "5432"
  user: user
  password: password
  dbname: users
  ssl_mode: disable

http-server:
  address: localhost:8080
  timeout: 4s
  idle_timeout: 60s
```

- `http-server.address` is `host:port`; an empty host listens on all
  interfaces.
- `timeout` and `idle_timeout` are read as durations such as `4s`, `1m30s`
  or `250ms` and are available on the loaded `Config`, but the server does
  not apply them.
- A `logger` section (`level`, `encoding`, `output_paths`) is read into
  `Config.logger`; the command itself always logs with the defaults below.

On start-up the service connects to the database and creates the `users`
table if it does not exist yet. A failure to create the table is logged and
does not stop the service.

Log lines go to standard output and are appended to `logs.txt` in the
working directory, at level `info` and above. If `logs.txt` cannot be
opened, only standard output is used.

## Running

```
userhub
userhub --config /etc/userhub/config.yaml
```

The server runs until it receives an interrupt (Ctrl+C), then shuts down
and exits with status 0. It exits with status 1 if the configuration cannot
be loaded, the database cannot be reached, or the address cannot be bound.

## API

| Method   | Path                  | What it does                                    |
|----------|-----------------------|-------------------------------------------------|
| `GET`    | `/`                   | Health check; answers `server is running`       |
| `POST`   | `/users`              | Create a user                                   |
| `GET`    | `/users/search`       | Find users by first name, last name and age     |
| `GET`    | `/users/list`         | List users not soft-deleted, filtered by ranges |
| `DELETE` | `/users/{id}`         | Delete a user permanently                       |
| `DELETE` | `/users/{id}/soft`    | Mark a user as deleted                          |
| `PATCH`  | `/users/{id}/update`  | Change a user's names and age                   |

Error answers carry a JSON body `{"errors": ["..."]}`, where several
validation problems are joined by `", "` into one message. Problems with
the request body itself (missing body, malformed JSON, unknown or
wrongly-typed fields) are answered with a plain-text `400` instead. An
unexpected failure while serving a request answers an empty `500`.

### Create a user

```
POST /users
{"first_name": "Ada", "last_name": "Lovelace", "age": 36}
```

The body must be a JSON object with only the fields `first_name`,
`last_name` and `age`. Both names must be non-blank and the age must be
between 1 and 120. The user is stored under a newly generated UUID with its
`recording_date` set to the current Unix time in seconds. A successful call
answers `201 Created`:

```json
{"message": "user Ada saved"}
```

Validation failures answer `400`:

```json
{"errors": ["enter your first_name, age must be greater than zero"]}
```

### Search users

```
GET /users/search?first_name=Ad&last_name=Lo&age=36
```

This endpoint, like `/users/list`, also expects a JSON request body of the
same shape as for creating a user (`{}` will do); without one it answers
`400 body is nil`.

`first_name` and `last_name` are required and are matched as
case-insensitive prefixes. `age` must be an integer between 0 and 120 and
must be given; `age=0` matches any age. A non-integer age answers
`400 incorrect age`, other invalid parameters `400 validation error`. The
answer is

```json
{"answer": [{"id": "…", "first_name": "Ada", "last_name": "Lovelace", "age": 36, "recording_date": 0}]}
```

Search results include soft-deleted users and do not carry their recording
date. When nothing matches, `answer` is `null`.

### List users

```
GET /users/list?min_age=18&max_age=65&start_date=0&end_date=1700000000
```

Every parameter is optional and must be an integer. Ages and dates must not
be negative, and each minimum must not exceed its maximum. The answer is
`{"users": [...]}` with soft-deleted users left out, or `{"users": null}`
when nothing matches.

### Update, delete, soft delete

`{id}` must be a UUID; anything else answers `400`.

```
PATCH /users/{id}/update
{"first_name": "Ada", "last_name": "King", "age": 37}
```

The body may hold `id`, `first_name`, `last_name`, `age` and
`recording_date`; the `id` in the path wins. Names and age are replaced by
the values given (missing ones become empty or zero). The answer is the
user as sent, with the path's id. Unknown or soft-deleted users answer
`500 couldnt update user`.

```
DELETE /users/{id}        -> {"message": "User deleted"}
DELETE /users/{id}/soft   -> {"message": "User soft deleted"}
```

A permanent delete of an id that does not exist still succeeds; a soft
delete of one answers `500 soft delete error`.

## Using it as a library

The pieces can be put together by hand:

```python
from userhub.config import load_config
from userhub.logger import new_logger
from userhub.repository import PostgreSQL
from userhub.service import UserService
from userhub.server import Server

log = new_logger()
cfg = load_config("config/config.yaml")
db = PostgreSQL.connect(cfg, log)
try:
    Server(UserService(db, log), log).run(cfg)
finally:
    db.close()
```

- `PostgreSQL(engine, logger)` wraps any SQLAlchemy engine, and
  `create_tables()` creates the `users` table on it.
- `UserService` accepts any object providing the `UserDB` operations
  (`save_user`, `get_users`, `list_users`, `delete_user`,
  `soft_delete_user`, `update_user`); storage failures are raised as
  `ServiceError`.
- `Server(...).app` is the Flask application, usable with Flask's test
  client without starting a server.
- `userhub.validation` holds the request decoding (`decode_json_body`) and
  the validation rules, which raise `ValidationError`.
- `init_logger(LoggerConfig(level=..., output_paths=[...]))` configures the
  `userhub` logger; levels are `debug`, `info`, `warn`, `error`, `dpanic`,
  `panic` and `fatal`, and paths are file names or `stdout` / `stderr`.

## What it does not do

There is no authentication, no pagination and no way to restore a
soft-deleted user. The configured read, write and idle timeouts are not
enforced by the server.