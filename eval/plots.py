"""Generate figures: wait and ride time per client, VIP vs regular waits."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd


def _load_table(csv_path: str | Path) -> pd.DataFrame:
    return pd.read_csv(csv_path)


def plot_client_bars(
    csv_path: str | Path,
    output_path: str | Path | None = None,
    column: str = "Wait",
    color: str = "#f59e0b",
) -> Path | None:
    """Bar chart of one table column per client (Wait or Service Duration). None if the column is missing."""
    df = _load_table(csv_path)
    if output_path is None:
        slug = column.lower().replace(" ", "_")
        output_path = Path(csv_path).parent / f"{Path(csv_path).stem}_{slug}_bars.png"
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if column not in df.columns or "Client" not in df.columns:
        return None
    fig, ax = plt.subplots()
    ax.bar(df["Client"], df[column], color=color, label=column)
    ax.set_xlabel("Client")
    ax.set_ylabel("Minutes")
    ax.set_title(f"{column} per client")
    ax.grid(True, axis="y", linestyle="--", alpha=0.4)
    ax.legend()
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def plot_wait_line(
    csv_path: str | Path,
    output_path: str | Path | None = None,
) -> Path | None:
    """Line chart of wait per client, VIP clients marked."""
    df = _load_table(csv_path)
    if output_path is None:
        output_path = Path(csv_path).parent / f"{Path(csv_path).stem}_wait_line.png"
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if "Wait" not in df.columns or "Client" not in df.columns:
        return None
    fig, ax = plt.subplots()
    ax.plot(df["Client"], df["Wait"], marker="o", markersize=4, color="#f59e0b", label="Wait")
    if "Class" in df.columns:
        vip = df[df["Class"] == "VIP"]
        if not vip.empty:
            ax.scatter(vip["Client"], vip["Wait"], s=60, color="#ca8a04", zorder=3, label="VIP")
    ax.set_xlabel("Client")
    ax.set_ylabel("Minutes")
    ax.set_title("Wait per client")
    ax.legend()
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def plot_class_comparison(
    csv_path: str | Path,
    output_path: str | Path | None = None,
) -> Path | None:
    """Mean wait by class (VIP vs Regular)."""
    df = _load_table(csv_path)
    if output_path is None:
        output_path = Path(csv_path).parent / f"{Path(csv_path).stem}_class_wait.png"
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if "Class" not in df.columns or "Wait" not in df.columns:
        return None
    means = df.groupby("Class")["Wait"].mean()
    fig, ax = plt.subplots(figsize=(5, 4))
    means.plot(kind="bar", ax=ax, color=["#6b7280" if c == "Regular" else "#ca8a04" for c in means.index])
    ax.set_ylabel("Mean wait (minutes)")
    ax.set_title("Mean wait by class")
    plt.setp(ax.xaxis.get_majorticklabels(), rotation=0)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def plot_client_table(csv_path: str | Path) -> list[Path]:
    """All per-client charts for one exported table. Charts without their columns are skipped."""
    out = [
        plot_client_bars(csv_path, column="Wait"),
        plot_client_bars(csv_path, column="Service Duration", color="#8884d8"),
        plot_wait_line(csv_path),
    ]
    df = _load_table(csv_path)
    if "Class" in df.columns and (df["Class"] == "VIP").any():
        out.append(plot_class_comparison(csv_path))
    return [p for p in out if p is not None]


def generate_all_plots(results_dir: str | Path = "results") -> list[Path]:
    """Plot every exported client table found under results_dir."""
    results_dir = Path(results_dir)
    written: list[Path] = []
    for table in sorted(results_dir.rglob("clients_*.csv")):
        written.extend(plot_client_table(table))
        print(f"Saved plots for {table.name}")
    return written


if __name__ == "__main__":
    import argparse

    p = argparse.ArgumentParser()
    p.add_argument("--results_dir", type=str, default="results")
    args = p.parse_args()
    generate_all_plots(results_dir=args.results_dir)
