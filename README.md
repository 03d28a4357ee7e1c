# fusion

Building blocks for application logging and notifications:

- validated logger configuration (console output, file output, level,
  file format and rotation settings);
- a thread-safe log file writer that rotates files by size or time,
  gzip-compresses rotated files and prunes old ones, with recovery strategies
  for failed writes;
- data models for users, notification channels and notification logs;
- a webhook notification provider that sends messages as JSON over HTTP.

It needs nothing outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Logger configuration

`fusion.logger.config` holds the configuration types. Every type has a
`validate()` method that raises `ConfigError` (a `ValueError`) for invalid
settings; the `create(...)` class methods build and validate in one step.

```python
from fusion.logger.config import (
    ConsoleConfig,
    FileConfig,
    LogFormat,
    LoggerConfigBuilder,
    RotationConfig,
    RotationStrategy,
)

rotation = RotationConfig.create(RotationStrategy.size(), 10 * 1024 * 1024, 5, True)
file_config = FileConfig.create(True, "logs/app.log", True, LogFormat.parse("json"), rotation)

config = (
    LoggerConfigBuilder()
    .level("debug")
    .console(ConsoleConfig(enabled=True, colored=False))
    .file(file_config)
    .build()
)
print(config.parse_level())  # 10, the numeric logging level for "debug"
```

- `LoggerConfig` has a `console`, a `file` and a `level`. Levels are `trace`,
  `debug`, `info`, `warn` and `error`, in any case; `parse_level()` returns
  the numeric level (`trace` is `TRACE`, 5). At least one output must be
  enabled. `update(new_config)` replaces the settings after validating them.
- `ConsoleConfig` defaults to enabled and coloured.
- `FileConfig` defaults to disabled, path `logs/app.log`, append mode and
  `LogFormat.JSON`. When enabled, the path must not be empty and the rotation
  settings must be valid. Validation never touches the file system.
- `LogFormat` is `FULL`, `COMPACT` or `JSON`; `LogFormat.parse` reads a name.
- `RotationConfig` defaults to size-based rotation at 10 MiB, 5 files, no
  compression; `max_size` and `max_files` must be greater than 0.
- `RotationStrategy.size()`, `.time(unit)`, `.count()` and `.combined()`
  choose when to rotate; `TimeUnit` is `HOURLY`, `DAILY`, `WEEKLY` or
  `MONTHLY`. `TimeUnit.duration_from(start)` uses real month lengths, while
  `duration_seconds()` counts a month as 30 days.

## Rotation and compression

`fusion.logger.rotation.RotationManager` decides and performs rotation:

- `should_rotate(size)` is true when the size reaches `max_size` (size
  strategy), when the time unit has elapsed since the last rotation (time
  strategy), or either of these with a daily period (combined strategy). The
  count strategy never triggers rotation; it only limits kept files.
- `rotate(path)` renames the file to `<stem>.<YYYYmmdd_HHMMSS>.<ext>`,
  compresses it when `compress` is set, and removes the oldest files that
  share the stem so that fewer than `max_files` remain. It returns the path of
  the rotated file, or `None` if there was no file.
- `force_cleanup(path)` prunes harder, keeping about half of `max_files`.

`fusion.logger.compression.CompressionHandler(enabled).compress_file(path)`
writes `<name>.gz` with gzip, deletes the original and returns the new path;
when disabled it leaves the file alone and returns `None`.

## Writing log files

```python
from fusion.logger.config import FileConfig
from fusion.logger.writer import RecoveryStrategy, RotatingFileWriter

config = FileConfig(enabled=True, path="logs/app.log")
with RotatingFileWriter(config, RecoveryStrategy.CLEANUP_AND_RETRY) as writer:
    writer.write("service started\n")
    writer.flush()
```

`RotatingFileWriter` creates the parent directory, opens the file in append
or truncate mode, and rotates before a write when its `RotationManager` says
so. `write()` takes bytes or text (encoded as UTF-8). When a write fails,
the optional `error_callback` is called with the error and the
`RecoveryStrategy` applies:

- `FALLBACK_TO_CONSOLE` switches to standard error;
- `CLEANUP_AND_RETRY` prunes old files, reopens and retries, and falls back
  to standard error if that does not help;
- `SILENT_DROP` discards the data and reports it as written.

`is_in_fallback_mode()` tells whether writes go to standard error, and
`try_recover()` reopens the file and returns to file output. After `close()`,
writes raise `ValueError`.

## Notifications

`fusion.models.notification` defines `ChannelType`, `NotificationStatus`,
`NotificationChannel`, `NewNotificationChannel`, `UpdateNotificationChannel`,
`NotificationLog`, `NewNotificationLog` and `WebhookConfig`.
`WebhookConfig.from_json` reads a decoded JSON object, defaulting the method
to `POST`, headers to none and the timeout to 30 seconds, and raises
`ValueError` for a missing `url` or wrongly typed fields; `to_json()` gives
the dict back.

```python
from fusion.models.notification import WebhookConfig
from fusion.notifications.provider import NotificationMessage
from fusion.notifications.webhook import WebhookProvider

provider = WebhookProvider(WebhookConfig.from_json({"url": "https://example.com/webhook"}))
provider.validate_config()
result = provider.send(NotificationMessage(body="Build finished", title="Deploy"))
print(result.success, result.status_code, result.duration_ms)
```

`NotificationProvider` in `fusion.notifications.provider` is the abstract
base for providers (`send`, `name`, `validate_config`).
`WebhookProvider.validate_config()` raises `ConfigValidationError` unless the
URL is well formed and uses HTTPS and the method is a valid HTTP token.
`send()` posts `{"title", "body", "metadata"}` as JSON with the configured
method, headers and timeout; any 2xx status counts as success, and network
failures are reported in the `NotificationResult` rather than raised.

`fusion.models.user` defines `User`, `NewUser` and `UpdateUser`;
`UpdateUser.changes()` returns the fields that are set.

## What it does not do

- It does not install anything into Python's `logging` module: there is no
  handler, no start-up function that applies a `LoggerConfig`, and no way to
  change the active level at run time. The writer is used directly.
- The models are plain dataclasses; there is no database storage or query
  layer for users, channels or notification logs.
- Only webhook delivery is provided; there are no email, SMS, Discord or
  Slack providers, and no HTTP server or command-line program.