# fpydemo

A small simulated flight-software deployment. It provides components that
exchange commands, events and telemetry, and a topology that cycles rate
groups from a timer: a base rate plus outputs divided by 2 and by 4.

## Components

Every component derives from `fpydemo.core.Component`. Output ports are
named and wired with `connect(port, handler)`; `invoke(port, *args)` calls
the connected handler and raises `RuntimeError` if the port is unconnected.
Each component records what it produces in `telemetry` (a list of
`(channel, value)` pairs), `events` (a list of `Event`s with a `Severity`)
and `responses` (a list of `(opcode, cmd_seq, CmdResponse)`). Calls can be
queued with `enqueue` and run one at a time with `do_dispatch`.

- `block_driver.BlockDriver` passes buffers from `buffer_in` to the
  `buffer_out` port and pings from `ping_in` to `ping_out`, and writes a
  `BD_Cycles` counter on every `sched` call.
- `ping_receiver.PingReceiver` counts pings (`PR_NumPings`) and echoes them
  to `ping_out` until `stop_pings` is commanded.
- `send_buff.SendBuff`, once `start_packets` is commanded, sends one packet
  on its `data` port per `sched_in` call: a packet id, 24 bytes of `0xFF` and
  their checksum. `inject_packet_error` corrupts the next packet's data.
  `gen_fatal` logs a FATAL event; `gen_assert` raises `AssertionError`.
- `recv_buff.RecvBuff` decodes packets given to `data`, checks the checksum,
  keeps a `PacketStat` and updates two simulated sensor channels.
  `encode_packet` and `decode_packet` give the packet layout (big-endian U32
  id, U16 length, data, U32 checksum); `decode_packet` raises `ValueError`
  for a malformed packet.
- `signal_gen.SignalGen` generates `SINE`, `SQUARE`, `TRIANGLE` or `NOISE`
  samples on each `sched_in` while running (`toggle`), keeps a four-entry
  history, and with `dp` records `SignalInfo` records into a
  `DataContainer` obtained from its `product_get` port (or requested through
  `product_request` and delivered to `dp_recv`), sending it on
  `product_send` when full or complete.
- `type_demo.TypeDemo` echoes `Choice` enums, choice tuples, `ChoicePair`,
  `ChoiceSlurry` and `ScalarStruct` values back as telemetry and events, and
  reports infinities and NaN with `dump_floats`.

```python
from fpydemo.block_driver import BlockDriver
from fpydemo.recv_buff import RecvBuff
from fpydemo.send_buff import SendBuff

driver = BlockDriver("blockDrv")
driver.sched(0)
driver.sched(0)
print(driver.telemetry)  # [('BD_Cycles', 0), ('BD_Cycles', 1)]

sender, receiver = SendBuff("sendBuff"), RecvBuff("recvBuff")
sender.connect("data", receiver.data)
sender.start_packets(0, 1)
sender.inject_packet_error(0, 2)
sender.sched_in(0)
print(receiver.stats)  # buff_err=1, packet_status=PACKET_STATE_ERRORS
```

## Topology

`topology.RateGroupDriver(divisors)` takes `(divisor, offset)` pairs and its
`tick()` returns the indices of the outputs that fire on that base tick.
`topology.Topology` uses the dividers `(1, 0), (2, 0), (4, 0)`: after
`setup()`, `start_rate_groups(interval)` calls every handler in
`rate_groups[i]` with context 0 whenever output `i` fires, once per
interval (seconds or a `timedelta`, in whole milliseconds), blocking until
`stop_rate_groups()` is called. `teardown()` stops it and releases the
driver.

## Running the deployment

```
pip install .
fpydemo -a 127.0.0.1 -p 50000
```

Options:

- `-a` hostname or IP address
- `-p` port number
- `-h` show usage and exit with status 0 (an unknown option exits with 1)

The command prints `Hit Ctrl-C to quit`, cycles the rate groups once per
second, and on Ctrl-C (or SIGTERM) tears the topology down and prints
`Exiting...`.

## What it does not do

The command line topology starts with empty rate groups: no components are
attached to it, so running it only cycles the timer. The hostname and port
are parsed into a `TopologyState`, but no network connection is opened and
no ground link, command dispatcher, health checker or parameter storage
exists. Components are wired and driven by your own code.

## Tests

```
pip install .[test]
pytest
```