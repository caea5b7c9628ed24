# mms

A small money management service. It keeps users and their income and
expense transactions in MySQL, issues PASETO v2 (local) access tokens and
runs a JSON HTTP server built on Flask.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

The service reads a YAML file. With no path given, `mms.config.load` looks
for `config.yaml` (or `config.yml`) in `./config` and then in the current
directory. No defaults are filled in: missing required values raise
`mms.config.ConfigError`.

```yaml
server:
  mode: release          # debug, release or test
  address: ":8080"

database:
  host: localhost
  port: 3306
  user: user
  password: password
  name: mms
  # or, instead of the fields above, a full DSN:
  # dsn: "user:password@tcp(localhost:3306)/mms?parseTime=true&loc=Local"

paseto:
  symmetric_key: placeholder   # base64 of exactly 32 random bytes
  expire_minutes: 60

log:
  level: info                  # trace, debug, info, warn, error, fatal, panic, disabled
```

Required values:

- `server.address` and `server.mode`
- either `database.dsn`, or `database.host`, `database.user` and `database.name`
- `paseto.symmetric_key`

`mms.config.parse_config` validates an already decoded mapping,
`mms.config.get` returns the loaded configuration (or `None`) and
`mms.config.set_config` installs one directly.

## Running the server

```
mms
mms --config path/to/config.yaml
```

On start-up the command loads the configuration, sets up logging on
standard output (an unknown level falls back to `info`), connects to the
database, applies the schema migration and starts listening on
`server.address` (`:8080` when empty; an empty host means all interfaces).
It exits with status 1 when the configuration, the database connection or
the server fails. Every request is logged with its method, path, status,
client address and latency in milliseconds.

`mms.app.create_app(cfg)` builds the Flask application without touching
the database; `server.mode` must be `debug`, `release` or `test`.

Routes:

- `GET /health` answers `{"status": "ok"}`.
- Under `/api/v1`: `POST`/`GET /users`, `GET`/`PUT`/`DELETE /users/<id>`,
  `POST`/`GET /transactions` and `GET /transactions/<id>`.

## What the package does not do

- The routes under `/api/v1` are placeholders: each answers `501` with
  `{"error": "not implemented"}`. There are no registration or login
  endpoints; the request schemas, user service and token service below
  are there for building them.
- `mms.app.main` applies the migration from the file
  `internal/infrastructure/persistence/migration/schema.sql`
  (`mms.persistence.SCHEMA_PATH`), read relative to the working directory.
  The package does not ship that file; without it the database connection
  step fails. `mms.persistence.run_migrations(conn, schema_path)` accepts
  another path.
- `mms.user.Service.authenticate` only looks the user up by e-mail; it
  does not check the password.

## Using the library

### Transactions

A transaction has a user, a positive amount, a description and a type,
either `income` or `expense` (`mms.transaction.TransactionType`).
`mms.transaction.Service` validates transactions and stamps their times
before handing them to a repository:

```python
from mms.transaction import Service, Transaction, InvalidAmountError

service = Service(repository)
tx = Transaction(user_id=1, amount=25.0, description="Lunch", type="expense")
service.create(tx)

try:
    service.create(Transaction(user_id=1, amount=0, description="x", type="income"))
except InvalidAmountError as exc:
    print(exc)   # amount must be greater than 0
```

A wrong type raises `InvalidTypeError`, a missing user id a plain
`TransactionError`.

`mms.usecase.TransactionUsecase` wraps the service with logging and offers
`create_transaction`, `get_transaction_by_id`, `get_user_transactions`,
`update_transaction` and `delete_transaction`.

### Storage

`mms.persistence.connect()` opens the database named by the loaded
configuration, runs the migration and keeps the connection for
`mms.persistence.get()` and `mms.persistence.close()`. `build_dsn` and
`parse_dsn` turn the configuration into connection arguments.

The MySQL-backed repositories are `mms.persistence.TxRepo` and
`mms.persistence.UserRepo`. They take any DB-API connection and its
placeholder style (`"%s"` by default, `"?"` for e.g. sqlite3). Lookups
that match no row raise `RecordNotFoundError`; any object with the same
methods can stand in for them.

### Users

`mms.user.Service.register` stores a new user, setting its creation time
when none is given. `authenticate` looks a user up by e-mail and raises
`InvalidCredentialsError` when there is no such user.

`mms.schemas.parse_register_request` and `parse_login_request` validate
decoded JSON bodies (required fields, e-mail format, a password of at
least six characters for registration) and raise
`RequestValidationError` listing each failed rule.

### Tokens

```python
import base64
import os
from datetime import timedelta

from mms.paseto import PasetoService, TokenError

key = base64.b64encode(os.urandom(32)).decode()
tokens = PasetoService(key)

access = tokens.create_token(42, timedelta(hours=24))
assert tokens.verify_token(access) == 42
```

A key that is not valid base64 or does not decode to 32 bytes raises
`ValueError`. `verify_token` raises `TokenError` for tampered, foreign or
expired tokens. `mms.paseto.from_config` builds the service from the
given or loaded configuration.

`mms.middleware.auth_required(paseto)` is a view decorator for Flask: it
expects an `Authorization: Bearer token` header, answers `401` with a
JSON error when the header is missing, in another form or carries a
token that fails verification, and otherwise stores the user id in
`flask.g.user_id`. `mms.middleware.install_request_logger(app)` adds the
request logging described above to any Flask app.