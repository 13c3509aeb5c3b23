from __future__ import annotations

import numpy as np
import pytest

from roadrough.processing.window import WindowAccumulator


class TestWindowAccumulator:
    def test_returns_none_until_full(self) -> None:
        acc = WindowAccumulator(4)
        assert acc.push(1.0) is None
        assert acc.push(2.0) is None
        assert acc.push(3.0) is None
        assert len(acc) == 3

    def test_completed_window_has_exact_capacity(self) -> None:
        acc = WindowAccumulator(4)
        out = None
        for v in (1.0, 2.0, 3.0, 4.0):
            out = acc.push(v)
        assert out is not None
        assert out.shape == (4,)
        np.testing.assert_array_equal(out, [1.0, 2.0, 3.0, 4.0])
        assert len(acc) == 0

    def test_completed_window_is_a_copy(self) -> None:
        acc = WindowAccumulator(2)
        acc.push(1.0)
        first = acc.push(2.0)
        acc.push(9.0)
        second = acc.push(8.0)
        assert first is not None and second is not None
        np.testing.assert_array_equal(first, [1.0, 2.0])
        np.testing.assert_array_equal(second, [9.0, 8.0])

    def test_discard_drops_partial_window(self) -> None:
        acc = WindowAccumulator(5)
        acc.push(1.0)
        acc.push(2.0)
        assert acc.discard() == 2
        assert len(acc) == 0

    def test_discarded_samples_do_not_leak_into_next_window(self) -> None:
        acc = WindowAccumulator(3)
        acc.push(7.0)
        acc.discard()
        out = [acc.push(v) for v in (1.0, 2.0, 3.0)]
        assert out[2] is not None
        np.testing.assert_array_equal(out[2], [1.0, 2.0, 3.0])

    @pytest.mark.parametrize("size", [0, -1, 2.5, True])
    def test_rejects_invalid_size(self, size) -> None:
        with pytest.raises(ValueError):
            WindowAccumulator(size)
