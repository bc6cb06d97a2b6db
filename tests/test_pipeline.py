"""End-to-end tests for the receipt batch pipeline."""

from decimal import Decimal

from receipt_tally.domain.tally import NoiseReason, TallyConfig
from receipt_tally.receipt.aggregator import Aggregator
from receipt_tally.receipt.formatter import format_report
from receipt_tally.receipt.pipeline import ReceiptPipeline, tally_receipts


def test_two_receipt_grocery_batch(two_receipts: list[tuple[str, str]]) -> None:
    report = tally_receipts(two_receipts)

    assert [(p.canonical_name, p.total_price, p.occurrence_count) for p in report.products] == [
        ("milk whole", Decimal("8.97"), 2),
        ("eggs large", Decimal("4.99"), 1),
        ("bread wheat", Decimal("2.49"), 1),
    ]
    assert report.grand_total == Decimal("16.45")
    assert report.unique_product_count == 3
    assert report.receipt_count == 2
    assert report.noise_counts == {NoiseReason.DENYLISTED: 1}
    assert report.products[0].source_receipts == ("receipt-1", "receipt-2")


def test_same_batch_twice_gives_identical_reports(two_receipts: list[tuple[str, str]]) -> None:
    first = tally_receipts(two_receipts)
    second = tally_receipts(two_receipts)

    assert first == second
    assert format_report(first) == format_report(second)


def test_noise_lines_contribute_nothing() -> None:
    report = tally_receipts(
        [("r1", ["TOTAL $45.67", "TAX 7.5%", "SUBTOTAL 40.00", "LAPTOP BAG $1500.00", "coffee 3.50"])]
    )

    assert [p.canonical_name for p in report.products] == ["coffee"]
    assert report.grand_total == Decimal("3.50")
    assert report.noise_counts == {NoiseReason.DENYLISTED: 3, NoiseReason.PRICE_ABOVE_CEILING: 1}
    assert report.rejected_outliers == 1


def test_empty_batch_is_an_empty_report() -> None:
    report = tally_receipts([])

    assert report.products == ()
    assert report.grand_total == Decimal("0.00")
    assert report.receipt_count == 0


def test_receipt_of_only_noise() -> None:
    report = tally_receipts([("r1", "SUPERMARKET\nTHANK YOU\n\nTOTAL 0.00")])

    assert report.is_empty()
    assert report.receipt_count == 1
    assert report.noise_total == 4


def test_receipt_order_decides_canonical_name() -> None:
    first = tally_receipts([("a", "milk whle 1.00"), ("b", "milk whole 1.00")])
    second = tally_receipts([("b", "milk whole 1.00"), ("a", "milk whle 1.00")])

    assert first.products[0].canonical_name == "milk whle"
    assert second.products[0].canonical_name == "milk whole"
    assert first.grand_total == second.grand_total == Decimal("2.00")


def test_later_item_matches_product_from_same_receipt() -> None:
    pipeline = ReceiptPipeline()

    items = pipeline.ingest_receipt("r1", "Bananas 1.20\nBananes 0.80\nBananas 1.00")

    assert len(items) == 3
    (product,) = pipeline.aggregator.products
    assert product.canonical_name == "Bananas"
    assert product.total_price == Decimal("3.00")
    assert product.occurrence_count == 3


def test_pipeline_accumulates_into_supplied_aggregator() -> None:
    aggregator = Aggregator()
    pipeline = ReceiptPipeline(aggregator=aggregator)

    pipeline.run([("r1", "milk whole 3.99")])
    report = pipeline.run([("r2", "milk whole 1.01")])

    assert report.products[0].total_price == Decimal("5.00")
    assert report.receipt_count == 2
    assert aggregator.report() == report


def test_supplied_aggregator_config_drives_classification() -> None:
    aggregator = Aggregator(TallyConfig(similarity_threshold=0.95))
    pipeline = ReceiptPipeline(config=TallyConfig(price_ceiling=Decimal("2000")), aggregator=aggregator)

    report = pipeline.run([("r1", "tv 1500.00\nmilk whole 3.99\nmilk whle 4.98")])

    assert pipeline.config is aggregator.config
    assert pipeline.classifier.config.price_ceiling == Decimal("1000.00")
    assert [p.canonical_name for p in report.products] == ["milk whle", "milk whole"]
    assert report.noise_counts == {NoiseReason.PRICE_ABOVE_CEILING: 1}


def test_config_reaches_classifier_and_matcher() -> None:
    config = TallyConfig(similarity_threshold=0.95, price_ceiling=Decimal("5.00"))

    report = tally_receipts([("r1", "milk whole 3.99\nmilk whle 4.98\nwine 12.00")], config)

    assert [p.canonical_name for p in report.products] == ["milk whle", "milk whole"]
    assert report.noise_counts == {NoiseReason.PRICE_ABOVE_CEILING: 1}


def test_european_receipt() -> None:
    text = "\n".join(
        [
            "BRAUHAUS AM MARKT",
            "4x Löwenbräu Original a 3,00 12,00",
            "1 Cheeseburger* 1,19",
            "2x Lowenbrau Origina a 3,00 6,00",
            "SUMME EUR 19,19",
            "MwSt 19% 3,06",
        ]
    )
    config = TallyConfig(denylist_keywords=TallyConfig().denylist_keywords | {"summe", "mwst"})

    report = tally_receipts([("bon-1", text)], config)

    assert [(p.canonical_name, p.total_price) for p in report.products] == [
        ("Löwenbräu Original", Decimal("18.00")),
        ("1 Cheeseburger", Decimal("1.19")),
    ]
