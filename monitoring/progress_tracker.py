from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, MofNCompleteColumn, TimeRemainingColumn


class ProgressTracker:
    def __init__(self, console):
        self.console = console

    def create_progress(self, transient: bool = False):
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=transient
        )

    def page_callback(self, progress, task_id):
        """Adapt a progress task to the (pages_done, page_count) extractor callback."""
        def _update(done: int, total: int) -> None:
            progress.update(task_id, completed=done, total=total)
        return _update
