"""Grow and shrink subscriptions from inside handlers.

Starts on a control channel. Publishing ``join <channel>`` or
``watch <pattern>`` there adds subscriptions to the running loop,
``leave <channel>`` drops one, and ``stop`` ends the loop at once.

    python examples/reentrant_subscribe.py --url redis://localhost:6379/0

    redis-cli publish control "watch sensors.*"
    redis-cli publish sensors.kitchen 21.5
    redis-cli publish control stop
"""

import argparse

from resp_pubsub import STOP, connect


def main(url: str, control: str) -> None:
    with connect(url) as client:

        def register(on):
            @on.message
            def command(ctl, channel, payload):
                if channel != control:
                    print(f"[{channel}] {payload}")
                    return None
                verb, _, arg = payload.partition(" ")
                if verb == "join":
                    ctl.subscribe(arg)
                elif verb == "leave" and arg in ctl.channels:
                    ctl.unsubscribe(arg)
                elif verb == "watch":
                    ctl.psubscribe(arg)
                elif verb == "stop":
                    return STOP
                return None

            @on.pmessage
            def watched(ctl, pattern, channel, payload):
                print(f"[{pattern} -> {channel}] {payload}")

            on.subscribe(lambda ctl, channel, total: print(f"+ {channel}"))
            on.psubscribe(lambda ctl, pattern, total: print(f"+ {pattern} (pattern)"))
            on.unsubscribe(lambda ctl, channel, total: print(f"- {channel}"))

        client.subscribe(control, register)
        print("Stopped; every subscription was dropped")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reentrant subscribe demo")
    parser.add_argument("--url", default="redis://localhost:6379/0")
    parser.add_argument("--control", default="control")
    args = parser.parse_args()
    main(args.url, args.control)
