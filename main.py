import getpass
from datetime import datetime

from hookwork import EventEmitter, Hooks
from hookwork.config import HookSettings, configure_logging


def quickstart(emitter: EventEmitter) -> None:
    emitter.on(
        "script.start",
        lambda user, when: print(f"User {user!r} has started this script at {when}."),
        10,
        2,
    )
    emitter.emit("script.start", getpass.getuser(), datetime.now().strftime("%H:%M:%S %Y-%m-%d"))


def cancelling(emitter: EventEmitter) -> None:
    emitter.on("event", lambda: print("1st listener reacted to the event."), 10, 0)
    emitter.on("event", lambda: print("2nd listener reacted to the event."), 10, 0)
    third = lambda: print("3rd listener reacted to the event.")  # noqa: E731
    emitter.on("event", third, 10, 0)

    print("------")
    emitter.emit("event")

    print("-------")
    emitter.off("event", third)
    emitter.emit("event")

    print("-------")
    emitter.cancel()
    emitter.emit("event")


def delayed(emitter: EventEmitter) -> None:
    # starts reacting on the 3rd emit
    emitter.delay("event.number", 3, lambda n: print(f"Event has been fired with number = {n}."))
    for counter in range(1, 6):
        emitter.emit("event.number", counter)


def disposable(emitter: EventEmitter) -> None:
    emitter.once("event.number", lambda n: print(f"Event has been fired with number = {n}."))
    for counter in range(1, 4):
        emitter.emit("event.number", counter)


def main():
    configure_logging(HookSettings.from_env().log_level)

    for scenario in (quickstart, cancelling, delayed, disposable):
        print(f"\n== {scenario.__name__} ==")
        scenario(EventEmitter(Hooks()))


if __name__ == "__main__":
    main()
