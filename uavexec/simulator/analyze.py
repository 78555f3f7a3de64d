import matplotlib.pyplot as plt
import pandas as pd


def plot_telemetry(frame: pd.DataFrame, path: str, title: str = "UAV Telemetry"):
    """Plot battery level and altitude over time, one line per UAV.

    Args:
        frame: Telemetry as returned by ``Simulator.telemetry()``
        path: Output image file, format taken from the extension
        title: Figure title

    Returns:
        pandas.DataFrame: Per-node summary (final battery %, max altitude,
        samples), indexed by node name
    """
    if frame.empty:
        raise ValueError("No telemetry to plot")

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

    for name, rows in frame.groupby("node", sort=False):
        ax1.plot(rows["time"], rows["battery_percentage"], linewidth=2, label=name)
        ax2.plot(rows["time"], rows["z"], linewidth=2, label=name)

    ax1.set_title(title, fontsize=14)
    ax1.set_ylabel("Battery (%)", fontsize=12)
    ax1.set_ylim(0, 105)
    ax1.grid(True, alpha=0.3)
    ax1.legend(loc="upper right")

    ax2.set_ylabel("Altitude (m)", fontsize=12)
    ax2.set_xlabel("Time (s)", fontsize=12)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    fig.savefig(path)
    plt.close(fig)

    return frame.groupby("node", sort=False).agg(
        final_battery=("battery_percentage", "last"),
        max_altitude=("z", "max"),
        samples=("time", "count"),
    )
