# runkit

Small building blocks for long-running Python services:

- **`runkit.runner.RunnerManager`** runs several tasks in parallel threads. As
  soon as one returns, the shared context is cancelled so the others can stop
  too; errors raised by the tasks are collected and raised together as one
  `JoinedError` (one message per line). `join_errors()` combines errors the
  same way.
- **`runkit.closer.RunnerCloserManager`** does the same and then calls a set
  of closers once the main tasks are done, optionally with a grace period
  after which a fatal shutdown is forced.
- **`runkit.context`** provides cancellable `Context` objects (`background()`,
  `with_cancel(parent)`) and a `Pool` that is done only once every context in
  it is done.
- **`runkit.byteslicepool.ByteSlicePool`** recycles `ByteSlice` buffers with a
  minimum capacity.
- **`runkit.normalize`** turns loosely-typed configuration mappings into
  string-keyed ones (`normalize`) and picks out prefixed keys (`prefixed_by`).

## Installation

```
pip install .
```

## Running tasks together

```python
from runkit.context import background
from runkit.runner import RunnerManager

def serve(ctx):
    ctx.wait(None)   # runs until another task returns

def job(ctx):
    return None      # returning cancels the others

RunnerManager(serve, job).run(background())
```

Adding tasks with `add()` or calling `run()` a second time after the manager
has started raises `ManagerAlreadyStartedError`.

## Graceful shutdown

```python
from runkit.closer import RunnerCloserManager
from runkit.context import background

def job(ctx):
    return None

manager = RunnerCloserManager(None, job)
manager.add_closer(lambda: print("cleaning up"))
manager.run(background())
```

The first argument is the grace period in seconds (or a `timedelta`); `None`
means shutdown waits for the closers indefinitely. When a grace period is set
and the closers do not all return within it, the process exits; use
`with_fatal_shutdown(fn)` to call something else instead.

A closer may be a zero-argument callable, a callable taking a context, or an
object with a `close()` method. Anything else raises `TypeError`; adding a
closer once the manager is closing raises `ManagerAlreadyClosedError`.
`close()` stops the running tasks, waits for the closers and raises the
combined error, if any; `wait_until_shutdown()` blocks until everything is
finished.

## Context pools

```python
from runkit.context import Pool, background, with_cancel

a = with_cancel(background())
b = with_cancel(background())
pool = Pool(a, b)
a.cancel()
b.cancel()
pool.wait(1.0)   # True: the pool is done once all members are
```

`Pool.add(ctx)` tracks another context unless the pool is already done;
`Pool.cancel()` finishes the pool at once and drops its members.

## Byte buffers

```python
from runkit.byteslicepool import ByteSlicePool

pool = ByteSlicePool(32)
buf = pool.get(32)        # empty, capacity 32
buf = pool.resize(buf, 48)  # length 48, capacity 64
pool.put(buf)
```

## Configuration helpers

```python
from runkit.normalize import normalize, prefixed_by

prefixed_by({"testOne": "a", "testTwo": "b", "other": "c"}, "test")
# {'one': 'a', 'two': 'b'}
```

`normalize` raises `NormalizeError` when a mapping holds a key that is not a
string.

## What this package does not do

It does not decode configuration mappings into typed objects: values are
normalised and filtered, but strings are not converted to numbers, booleans,
durations or datetimes.

## Running the tests

```
pip install .[test]
pytest
```