# voicelink

A small voice relay made of three parts, using only the standard library:

- **a relay server** that accepts TCP connections and forwards every chunk of
  bytes it receives from any participant to all connected participants, the
  sender included;
- **an audio client** with a text menu that connects to the server, streams
  raw 32-bit float samples read from a file and reports what it receives back;
- **a messenger** that posts chat messages as a JSON body with `message` and
  `sender` fields and prints the server's reply or the error.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running

### Relay server

```
voicelink-server [--host HOST] [--port PORT]
```

By default it listens on `0.0.0.0`, port `8080`, prints `New connection` for
each client, and reads from each client in chunks of up to 1024 bytes. Stop it
with Ctrl+C.

### Audio client

```
voicelink-client [--input FILE]
```

`--input` names a file of raw, native-byte-order, mono float32 samples. It is
read in blocks of 256 samples, and each block is sent to the server as it is
read. The default is the null device, so nothing is sent.

The client reads its menu choices from standard input:

```
--- Menu ---
1. Connect to server
2. Start audio
3. Stop audio
4. Exit
Enter your choice:
```

Choose `1` and enter the server host and port; the connection attempt times
out after 2 seconds and the status is printed. Then choose `2` to begin
streaming and `3` to stop. Starting audio before connecting, starting it
twice, or stopping it when it is not running only prints a notice. For every
chunk that comes back from the server the client prints its size and its first
ten bytes as signed values:

```
Received 8 bytes of audio data
First few bytes: 0 0 0 0 0 0 0 63
```

End of input or choice `4` exits.

### Messenger

```
voicelink-messenger [--url URL] [--sender NAME]
```

Each line of standard input is posted as one message to `--url` (default
`http://192.168.0.78:5000/`) with `Content-Type: application/json`, with
sender `user1` unless `--sender` is given. After each post it prints
`Message sent: <reply body>` or `Error: <reason>`. Empty lines are not sent.

## Using it from Python

- `voicelink.server`: `Server(host, port)` with `start`, `close`,
  `serve_forever`, `deliver`, `join`, `leave`, and the `port` and
  `participants` properties; `Session` with `start`, `deliver` and `close`.
  Every chunk a session reads goes to `Server.deliver`, which queues it to
  every participant; writes to one participant go out in order.
- `voicelink.audio`: `AudioCapture(source, frames_per_buffer, sample_rate)`
  with `start_capture(callback)` and `stop_capture`, usable as a context
  manager; capture runs on a background thread and reads from standard input
  when no source is given. `encode_samples` and `decode_samples` convert
  between float samples and their float32 bytes; `decode_samples` raises
  `ValueError` when the length is not a whole number of samples.
- `voicelink.client`: `Client` with `connect(host, port)`, `start_audio`,
  `stop_audio`, `close`, the `is_connected` and `is_capturing` properties,
  usable as a context manager; `describe_received` for the summary printed for
  each received chunk; `print_menu`.
- `voicelink.messenger`: `MessengerClient(url, sender)` with
  `send_message(message)`, which returns the line added to its `chat_display`
  list (or `None` for an empty message); `build_payload(message, sender)`,
  which builds the indented UTF-8 JSON body.

```python
from voicelink.audio import decode_samples, encode_samples

data = encode_samples([0.0, 0.5, -1.0])
assert decode_samples(data) == [0.0, 0.5, -1.0]
```

## What it does not do

- There is no microphone capture and no playback: the audio client sends
  samples from a file or stream, and received audio is only summarised, not
  played.
- The messenger has no window; it works on standard input and output.