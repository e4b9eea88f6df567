from docvision.concurrency.gate import ConcurrencyGate
from docvision.vision.cache import AnnotationCache


class RunCaches:
    """Every memo the pipeline keeps, scoped to one document run.

    The orchestrator owns one instance, hands its parts to the components it
    builds and calls `reset()` before each run.
    """

    def __init__(self, annotation_concurrency: int) -> None:
        self.gate = ConcurrencyGate(annotation_concurrency)
        self.annotations = AnnotationCache(self.gate)
        self.validation_verdicts: dict[str, bool] = {}
        self.seen_asset_hashes: set[str] = set()
        self.seen_page_hashes: set[str] = set()

    def reset(self) -> None:
        self.annotations.clear()
        self.validation_verdicts.clear()
        self.seen_asset_hashes.clear()
        self.seen_page_hashes.clear()
