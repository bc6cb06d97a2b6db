"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import receipt_tally
    import receipt_tally.application.tally
    import receipt_tally.cli.main
    import receipt_tally.receipt
    import receipt_tally.runtime

    assert receipt_tally is not None
    assert receipt_tally.application.tally is not None
    assert receipt_tally.cli.main is not None
    assert receipt_tally.receipt is not None
    assert receipt_tally.runtime is not None
