"""Subscribe to channels and print incoming messages.

Publish ``quit`` on any subscribed channel to leave subscription mode.

    pip install resp-pubsub

    python examples/subscribe_basic.py --url redis://localhost:6379/0 --channels news,alerts

    # in another shell
    redis-cli publish news hello
    redis-cli publish news quit
"""

import argparse
import logging

from resp_pubsub import connect


def main(url: str, channels: list[str]) -> None:
    with connect(url) as client:

        def register(on):
            @on.subscribe
            def joined(ctl, channel, total):
                print(f"Subscribed to {channel} ({total} active)")

            @on.message
            def received(ctl, channel, payload):
                print(f"[{channel}] {payload}")
                if payload == "quit":
                    ctl.unsubscribe()

            @on.unsubscribe
            def left(ctl, channel, total):
                print(f"Unsubscribed from {channel} ({total} active)")

        print("Listening for messages... (publish 'quit' to stop)\n")
        client.subscribe(channels, register)
        print(f"Back in command mode: PING -> {client.ping()}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="resp-pubsub subscriber")
    parser.add_argument("--url", default="redis://localhost:6379/0")
    parser.add_argument(
        "--channels",
        default="news",
        help="Comma-separated channels (default: news)",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    main(args.url, [c.strip() for c in args.channels.split(",")])
