import pytest

from systems.points_system import PointsCalculator


@pytest.fixture
def calculator():
    return PointsCalculator()


@pytest.mark.parametrize('result, method, expected', [
    ('Win', 'KO', 8),
    ('Win', 'TKO', 8),
    ('Win', 'UD', 5),
    ('Win', 'SD', 5),
    ('Win', 'Submission', 5),
    ('Win', None, 5),
    ('Loss', 'KO', -3),
    ('Loss', 'UD', -3),
    ('Draw', 'TKO', 0),
    ('Draw', 'MD', 0),
])
def test_point_deltas(calculator, result, method, expected):
    assert calculator.calculate(result, method) == expected


def test_free_text_methods_are_normalized_before_scoring(calculator):
    assert calculator.calculate('win', 'knockout') == 8
    assert calculator.calculate('WIN', 't.k.o.') == 8
    assert calculator.calculate('Win', 'ok') == 8
    assert calculator.calculate('Win', 'unanimous decision') == 5


def test_unrecognized_method_scores_as_decision(calculator):
    assert calculator.calculate('Win', 'flying elbow') == 5


def test_unknown_result_is_rejected(calculator):
    with pytest.raises(ValueError):
        calculator.calculate('Forfeit', 'KO')


def test_describe_breaks_down_stoppage_bonus(calculator):
    assert calculator.describe('Win', 'TKO') == 'Win (+5) + TKO bonus (+3) = +8'
    assert calculator.describe('Loss', 'KO') == 'Loss (-3)'
