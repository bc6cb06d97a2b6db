"""Receipt batch orchestration: lines -> classifier -> aggregator -> report."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from receipt_tally.domain.tally import Noise, ParsedItem, Report, TallyConfig
from receipt_tally.runtime import get_logger

from .aggregator import Aggregator
from .line_classifier import LineClassifier

logger = get_logger(__name__)

ReceiptText = str | Sequence[str]


class ReceiptPipeline:
    """
    Feed receipts through classification and aggregation, strictly in order.

    The aggregator persists across receipts: a later line may merge into a
    product created by an earlier receipt of the same batch.
    """

    def __init__(
        self,
        config: TallyConfig | None = None,
        aggregator: Aggregator | None = None,
        classifier: LineClassifier | None = None,
    ) -> None:
        if aggregator is not None:
            # The aggregator enforces its own ceiling; classify with the same options.
            if config is not None and config != aggregator.config:
                logger.warning("Pipeline config differs from the aggregator's; using the aggregator's")
            config = aggregator.config
        self.config = config or TallyConfig()
        self.aggregator = aggregator or Aggregator(self.config)
        self.classifier = classifier or LineClassifier(self.config)

    def ingest_receipt(self, receipt_id: str, text: ReceiptText) -> list[ParsedItem]:
        """Classify every line of one receipt and ingest the product lines."""
        self.aggregator.begin_receipt(receipt_id)
        items: list[ParsedItem] = []
        noise_count = 0
        for result in self.classifier.classify_text(text, source_receipt=receipt_id):
            if isinstance(result, Noise):
                self.aggregator.record_noise(result)
                noise_count += 1
                if result.line.strip():
                    logger.debug("%s:%s noise (%s): %r", receipt_id, result.line_number, result.reason.value, result.line)
                continue
            self.aggregator.ingest(result)
            items.append(result)

        logger.info("Receipt %s: %d item(s), %d noise line(s)", receipt_id, len(items), noise_count)
        return items

    def run(self, receipts: Iterable[tuple[str, ReceiptText]]) -> Report:
        """Ingest (receipt_id, text) pairs in the given order and report once."""
        for receipt_id, text in receipts:
            self.ingest_receipt(receipt_id, text)
        report = self.aggregator.report()
        if report.receipt_count == 0:
            logger.info("Empty batch: no receipts supplied")
        else:
            logger.info(
                "Batch of %d receipt(s): %d unique product(s), grand total %s",
                report.receipt_count,
                report.unique_product_count,
                report.grand_total,
            )
        return report


def tally_receipts(receipts: Iterable[tuple[str, ReceiptText]], config: TallyConfig | None = None) -> Report:
    """Run one batch through a fresh pipeline."""
    return ReceiptPipeline(config).run(receipts)
