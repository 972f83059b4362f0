import json
import sys
from pathlib import Path
import matplotlib.pyplot as plt


def load_session(path: Path):
    data = json.loads(path.read_text(encoding="utf-8"))
    punches = data.get("punches", [])
    return data, punches


def cumulative_by_side(punches, t0: float):
    by_side = {}
    for p in punches:
        by_side.setdefault(p["side"], []).append(p["t"] - t0)
    return {side: (times, list(range(1, len(times) + 1))) for side, times in by_side.items()}


def main():
    if len(sys.argv) < 2:
        print("Usage: python plot_session.py data/sessions/session-YYYYMMDD-HHMMSS.json")
        sys.exit(1)

    path = Path(sys.argv[1])
    data, punches = load_session(path)

    if not punches:
        print("No punches in session.")
        return

    # Time axis relative to first punch
    t0 = punches[0]["t"]
    times = [p["t"] - t0 for p in punches]

    # Plot 1: cumulative punches (both arms)
    plt.figure()
    plt.title("Punches over time")
    plt.xlabel("Seconds")
    plt.ylabel("Punches")
    plt.step(times, range(1, len(times) + 1), where="post")
    plt.grid(True)
    plt.show()

    # Plot 2: per-arm trend plus speed at detection
    fig, (ax_count, ax_speed) = plt.subplots(2, 1, sharex=True)
    ax_count.set_title("Punches by arm")
    ax_count.set_ylabel("Punches")
    for side, (ts, counts) in cumulative_by_side(punches, t0).items():
        ax_count.step(ts, counts, where="post", label=side)
    ax_count.grid(True)
    ax_count.legend()

    ax_speed.set_xlabel("Seconds")
    ax_speed.set_ylabel("Wrist speed (px/frame)")
    for side in ("left", "right"):
        rs = [p for p in punches if p["side"] == side]
        ax_speed.plot([p["t"] - t0 for p in rs], [p["velocity"] for p in rs],
                      marker="o", linestyle="", label=side)
    ax_speed.grid(True)
    ax_speed.legend()
    plt.show()


if __name__ == "__main__":
    main()
