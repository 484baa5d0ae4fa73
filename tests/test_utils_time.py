import pytest

from utils.time import month_name


def test_month_name_covers_every_month():
    names = [month_name(m) for m in range(1, 13)]
    assert names[0] == "January"
    assert names[1] == "February"
    assert names[11] == "December"
    assert len(set(names)) == 12


def test_month_name_accepts_numpy_ints():
    import numpy as np

    assert month_name(np.int64(7)) == "July"


def test_month_name_out_of_range_raises():
    with pytest.raises(ValueError):
        month_name(13)
    with pytest.raises(ValueError):
        month_name(0)
