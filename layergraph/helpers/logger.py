# layergraph/helpers/logger.py
import csv, json, datetime, pathlib
import matplotlib.pyplot as plt


class RunLogger:
    """Per-run history on disk: history.csv, history.json and loss/accuracy plots."""

    FIELDS = ["step", "lr", "loss", "accuracy"]

    def __init__(self, root="runs", tag="run"):
        ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        self.root = pathlib.Path(root)
        self.dir = self.root / f"{tag}_{ts}"
        self.dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.dir / "history.csv"
        self.json_path = self.dir / "history.json"
        self.rows = []  # one dict per reported step event
        self._csv_header_written = False

    # ---------- logging ----------
    def log_step(self, step, **kwargs):
        row = {"step": int(step), **{k: float(v) for k, v in kwargs.items()}}
        self.rows.append(row)
        with open(self.csv_path, "a", newline="") as f:
            # metrics outside FIELDS are kept in the JSON history only
            writer = csv.DictWriter(f, fieldnames=self.FIELDS, restval="", extrasaction="ignore")
            if not self._csv_header_written:
                writer.writeheader()
                self._csv_header_written = True
            writer.writerow(row)

    def history(self):
        """
        Regroup rows into {"loss": [(step, value), ...], ...}.
        Rows only carry the keys that were reported at that step.
        """
        out = {}
        for row in self.rows:
            for k, v in row.items():
                if k != "step":
                    out.setdefault(k, []).append((row["step"], v))
        return out

    def save_json(self):
        with open(self.json_path, "w") as f:
            json.dump(self.rows, f, indent=2)
        return str(self.json_path)

    # ---------- plotting ----------
    def _plots_dir(self, subdir):
        out = self.dir / subdir
        out.mkdir(parents=True, exist_ok=True)
        return out

    def _plot_series(self, series, ylabel, title, filename, subdir):
        if len(series) == 0:
            return None
        outdir = self._plots_dir(subdir)
        steps = [s for s, _ in series]
        values = [v for _, v in series]
        plt.figure()
        plt.plot(steps, values, label=ylabel.lower())
        plt.xlabel("Step")
        plt.ylabel(ylabel)
        plt.title(title)
        plt.legend()
        plt.tight_layout()
        path = outdir / filename
        plt.savefig(path, dpi=160)
        plt.close()
        return str(path)

    def plot_loss(self, tag="run", subdir="plots"):
        """Saves loss_curve_<tag>.png; returns its path, or None without loss rows."""
        return self._plot_series(self.history().get("loss", []), "Loss",
                                 f"Loss vs Steps ({tag})", f"loss_curve_{tag}.png", subdir)

    def plot_accuracy(self, tag="run", subdir="plots"):
        return self._plot_series(self.history().get("accuracy", []), "Accuracy",
                                 f"Test Accuracy vs Steps ({tag})", f"accuracy_{tag}.png", subdir)

    def plot_all(self, tag="run", subdir="plots"):
        self.plot_loss(tag=tag, subdir=subdir)
        self.plot_accuracy(tag=tag, subdir=subdir)
