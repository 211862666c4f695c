import pytest

from systems.tier_system import TierTable


@pytest.fixture
def tiers():
    return TierTable()


def test_every_point_total_is_in_exactly_one_band(tiers):
    for points in range(0, 1000):
        containing = [tier.name for tier in tiers.all_tiers() if tier.contains(points)]
        assert len(containing) == 1, f'{points} in {containing}'
        assert tiers.tier_for(points).name == containing[0]


@pytest.mark.parametrize('points, expected', [
    (0, 'Amateur'),
    (19, 'Amateur'),
    (20, 'Semi-Pro'),
    (39, 'Semi-Pro'),
    (40, 'Pro'),
    (89, 'Pro'),
    (90, 'Contender'),
    (149, 'Contender'),
    (150, 'Elite'),
    (10_000, 'Elite'),
])
def test_band_boundaries(tiers, points, expected):
    assert tiers.tier_for(points).name == expected


def test_negative_points_map_to_lowest_band(tiers):
    assert tiers.tier_for(-12).name == 'Amateur'


def test_lookup_and_neighbours(tiers):
    assert tiers.get_tier('semi-pro').name == 'Semi-Pro'
    assert tiers.get_tier('Champion') is None
    assert tiers.next_tier('Pro').name == 'Contender'
    assert tiers.next_tier('Elite') is None
    assert tiers.previous_tier('Pro').name == 'Semi-Pro'
    assert tiers.previous_tier('Amateur') is None
    assert tiers.rank_of('Amateur') == 0
    assert tiers.rank_of('Elite') == 4
    assert tiers.rank_of('Unknown') == -1


@pytest.mark.parametrize('bands', [
    # gap between bands
    [{'name': 'A', 'min_points': 0, 'max_points': 9}, {'name': 'B', 'min_points': 11, 'max_points': None}],
    # overlapping bands
    [{'name': 'A', 'min_points': 0, 'max_points': 10}, {'name': 'B', 'min_points': 10, 'max_points': None}],
    # bounded top band
    [{'name': 'A', 'min_points': 0, 'max_points': 9}, {'name': 'B', 'min_points': 10, 'max_points': 20}],
    # unbounded band below the top
    [{'name': 'A', 'min_points': 0, 'max_points': None}, {'name': 'B', 'min_points': 10, 'max_points': None}],
    [],
])
def test_broken_tier_configuration_is_refused(bands):
    with pytest.raises(ValueError):
        TierTable(bands)


def test_tier_definitions_are_hashable(tiers):
    by_tier = {tier: tier.name for tier in tiers.all_tiers()}

    assert by_tier[tiers.get_tier('Elite')] == 'Elite'
    assert isinstance(tiers.get_tier('Pro').to_dict()['benefits'], list)
