# slskcore

Thread-safe building blocks for a Soulseek client. The package uses only the
standard library.

## Installation

```
pip install slskcore
```

To install the test dependencies as well:

```
pip install "slskcore[test]"
```

## What is inside

- `slskcore.transfer_state`: `TransferDirection` (`DOWNLOAD`, `UPLOAD`) and
  `TransferState`, an `IntFlag`. You can combine flags, for example
  `QUEUED | REMOTELY` or `COMPLETED | SUCCEEDED`. The helpers are
  `is_completed()`, `is_queued()`, `is_active()`, `is_local()` and `is_remote()`.
  `str()` returns the flag names joined by `", "`, such as `"Queued, Remotely"`.
  For the empty state it returns `"None"`.
- `slskcore.transfer_errors`: the `TransferError` hierarchy, made up of
  `DuplicateTransferError`, `TransferNotFoundError` (also a `LookupError`),
  `TransferRejectedError`, `TransferSizeMismatchError`, `TransferFailedError` and
  `TransferConnectionError`. `TransferConnectionError` keeps the underlying
  exception as `underlying` and as `__cause__`.
- `slskcore.transfer`: `Transfer`, one upload or download.
  - `set_state()` records the previous state. It stamps `start_time` when the
    transfer enters `IN_PROGRESS` and `end_time` when it enters `COMPLETED`.
  - `update_progress()` keeps an exponential moving average of the speed. The
    average is refreshed at most once per second. On completion it is replaced
    by the overall average.
  - `percent_complete()`, `bytes_remaining()` and `remaining_time()` report on
    progress. `remaining_time()` returns a `timedelta`.
  - `emit_progress()` and `set_queue_position()` put `TransferProgress`
    snapshots on the `progress` queue. The queue holds up to 100 snapshots; any
    further ones are dropped. `close()` ends the stream with a final `None`.
  - `init_download_channels()` creates the single-slot `transfer_ready` and
    `transfer_conn` queues used to coordinate a download.
- `slskcore.transfer_registry`: `TransferRegistry`, which indexes transfers by
  local token, by user and remote token, and by direction, user and file.
  - Registering a second transfer for the same file, or reusing a token, raises
    `DuplicateTransferError`.
  - Operations on an unknown token raise `TransferNotFoundError`.
  - The lookup methods return `None` when nothing matches.
- `slskcore.queue_manager`: `QueueManager`, a FIFO upload queue of `QueueEntry`
  items. Positions start at 1; 0 means the file is not queued. Pass a custom
  resolver to `set_resolver()` to decide positions yourself. If the resolver
  raises, the exception reaches the caller of `resolve_position()`.
- `slskcore.router`: `MessageRouter`. It calls every handler registered for a
  message code, in the order they were registered. `register()` returns an id
  that `unregister()` accepts.
- `slskcore.slots`: `SlotManager`. It limits concurrent downloads and uploads;
  a limit of 0 means unlimited. It also allows only one upload per user at a
  time.
  - Acquisition blocks until a slot is free.
  - Pass `timeout=` (seconds or a `timedelta`) to raise `TimeoutError` when the
    time runs out.
  - Pass `cancel=` (a `threading.Event`) to raise
    `concurrent.futures.CancelledError` once the event is set.
  - `close()` raises `SlotManagerClosedError` in every waiter.
  - A positive `cleanup_interval` starts a background thread that drops idle
    per-user slots. `cleanup_idle_user_slots()` does the same on demand.
- `slskcore.options`: the `Options` dataclass and `default_options()`, plus the
  upload rejection errors `UploadRejectedError`, `FileNotSharedError`,
  `QueueFullError` and `UserBlockedError`.

## Examples

### Tracking a transfer

```python
from slskcore.transfer_registry import TransferRegistry
from slskcore.transfer_state import TransferState

registry = TransferRegistry()
transfer = registry.register_download("alice", "@@music/song.mp3", 1)
registry.set_size(1, 1000)
registry.set_state(1, TransferState.IN_PROGRESS)
registry.update_progress(1, 500)
print(transfer.percent_complete())   # 50.0

registry.complete(1, TransferState.COMPLETED | TransferState.SUCCEEDED, None)
print(str(transfer.state))           # Completed, Succeeded
registry.remove(1)
```

### Limiting concurrent uploads

```python
from slskcore.slots import SlotManager

with SlotManager(max_downloads=10, max_uploads=2) as slots:
    slots.acquire_upload_slot("alice", timeout=5.0)
    try:
        ...  # send the file
    finally:
        slots.release_upload_slot("alice")
```

### Queueing uploads

```python
from slskcore.queue_manager import QueueManager

uploads = QueueManager()
uploads.enqueue_upload("alice", "file1.mp3", 100)
uploads.enqueue_upload("bob", "file2.mp3", 101)
print(uploads.resolve_position("bob", "file2.mp3"))  # 2
```

### Routing messages

```python
from slskcore.router import MessageRouter

router = MessageRouter()
handler_id = router.register(42, lambda code, payload: print(code, payload))
router.dispatch(42, b"\x01\x02")
router.unregister(42, handler_id)
```

## What the package does not do

This package only does bookkeeping. It does not:

- open network connections or log in to a server,
- send searches,
- encode or decode protocol messages,
- move file data.

`Options` holds settings such as the server address and the listen port, but
nothing in the package reads them to connect. `file_sharer` is an untyped slot
for whatever shares your files. There is no command-line program.

## Running the tests

```
pytest
```