"""Heartbeat - rotating particle heart that pulses to a selectable rhythm."""

from heartfield import run

if __name__ == "__main__":
    run(title="Heartbeat")
