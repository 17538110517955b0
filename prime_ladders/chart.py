"""Generate a session-wins bar chart."""

from __future__ import annotations

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt


def make_wins_chart(
    wins: dict[str, int],
    output_path: str = "session_wins.png",
    title: str = "Prime Ladders Session Wins",
) -> str:
    """Horizontal bar chart of wins per player, most wins on top.

    Returns the path to the saved PNG.
    """
    sorted_items = sorted(wins.items(), key=lambda kv: kv[1], reverse=True)
    names = [name for name, _ in sorted_items]
    counts = [count for _, count in sorted_items]

    fig, ax = plt.subplots(figsize=(8, max(3, len(names) * 0.7)))
    bars = ax.barh(names, counts, color="#8B4513", edgecolor="white")

    for bar, count in zip(bars, counts):
        ax.text(
            bar.get_width() + 0.1, bar.get_y() + bar.get_height() / 2,
            str(count),
            va="center", fontsize=11, fontweight="bold",
        )

    ax.set_xlabel("Games won")
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.invert_yaxis()
    ax.set_xlim(left=0, right=max(counts, default=0) + 1)

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
