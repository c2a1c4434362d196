"""Tests for merging detector output into one anomaly list."""

from datetime import UTC, datetime, timedelta

from tenexlog.analyze import RateSpikeAnomaly, SensitivePathAnomaly, merge_anomalies


BASE = datetime(2025, 8, 28, 10, 0, tzinfo=UTC)


def rate(ip: str, minute_offset: int = 0) -> RateSpikeAnomaly:
    return RateSpikeAnomaly(
        src_ip=ip,
        minute=BASE + timedelta(minutes=minute_offset),
        count=50,
        baseline=20.0,
        z=1.73,
        confidence=0.44,
        reason=f'burst from {ip}',
    )


def sensitive(ip: str) -> SensitivePathAnomaly:
    return SensitivePathAnomaly(
        src_ip=ip,
        first_seen=BASE,
        last_seen=BASE + timedelta(minutes=3),
        hits=5,
        unique_prefixes=1,
        confidence=0.39,
        reason=f'probing from {ip}',
    )


class TestMergeAnomalies:
    def test_empty_inputs_give_empty_list(self):
        assert merge_anomalies([], []) == []
        assert merge_anomalies(None, None) == []
        assert isinstance(merge_anomalies(None, None, 10), list)

    def test_rate_spikes_then_sensitive(self):
        merged = merge_anomalies([rate('a'), rate('b')], [sensitive('c')])
        assert [(m.kind, m.src_ip) for m in merged] == [
            ('rate_spike', 'a'),
            ('rate_spike', 'b'),
            ('sensitive_paths', 'c'),
        ]

    def test_fields_of_other_kind_absent(self):
        spike, probe = merge_anomalies([rate('a')], [sensitive('b')])

        assert spike.minute == BASE
        assert spike.count == 50
        assert spike.baseline == 20.0
        assert spike.z == 1.73
        assert spike.first_seen is None
        assert spike.hits is None

        assert probe.hits == 5
        assert probe.unique_prefixes == 1
        assert probe.last_seen == BASE + timedelta(minutes=3)
        assert probe.minute is None
        assert probe.z is None

    def test_wire_shape_omits_absent_fields(self):
        spike, probe = merge_anomalies([rate('a')], [sensitive('b')])
        spike_wire = spike.model_dump(mode='json', by_alias=True, exclude_none=True)
        probe_wire = probe.model_dump(mode='json', by_alias=True, exclude_none=True)

        assert set(spike_wire) == {'kind', 'srcIp', 'minute', 'count', 'baseline', 'z', 'confidence', 'reason'}
        assert set(probe_wire) == {
            'kind',
            'srcIp',
            'firstSeen',
            'lastSeen',
            'hits',
            'uniquePrefixes',
            'confidence',
            'reason',
        }

    def test_cap_preserves_relative_order(self):
        rates = [rate(f'r{i}', minute_offset=-i) for i in range(3)]
        probes = [sensitive(f's{i}') for i in range(3)]
        merged = merge_anomalies(rates, probes, max_anomalies=4)
        assert len(merged) == 4
        assert [m.src_ip for m in merged] == ['r0', 'r1', 'r2', 's0']

    def test_cap_cuts_inside_first_kind(self):
        merged = merge_anomalies([rate(f'r{i}') for i in range(5)], [sensitive('s0')], max_anomalies=2)
        assert [m.src_ip for m in merged] == ['r0', 'r1']

    def test_non_positive_cap_is_unbounded(self):
        merged = merge_anomalies([rate('a')] * 30, [sensitive('b')] * 30, max_anomalies=0)
        assert len(merged) == 60
        merged = merge_anomalies([rate('a')] * 3, [sensitive('b')] * 3, max_anomalies=-5)
        assert len(merged) == 6
