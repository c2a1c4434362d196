"""Tests for the tenexlog command line interface."""

import json
import os

from click.testing import CliRunner

from tenexlog.__version__ import __version__
from tenexlog.cli.main import cli
from tenexlog.settings import DEFAULT_SENSITIVE_PREFIXES


def line(ts: str, ip: str, path: str = '/') -> str:
    return '\t'.join([ts, ip, 'host', 'GET', path, '200', '100', 'curl/8.0'])


PROBE_LOG = [line(f'2025-08-28T10:00:0{i}Z', '10.0.0.9', '/admin/login') for i in range(3)] + [
    line('2025-08-28T10:01:00Z', '10.0.0.2', '/index.html'),
]


class TestAnalyzeCommand:
    def setup_method(self):
        self.runner = CliRunner()

    def test_default_command_is_analyze(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, [path])
        assert result.exit_code == 0
        assert 'Log Analysis' in result.output
        assert 'Lines: 4' in result.output
        assert 'Unique sources: 2' in result.output

    def test_explicit_analyze(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, ['analyze', path, '--no-color'])
        assert result.exit_code == 0
        assert f'Path: {path}' in result.output
        assert 'Anomalies (0):' in result.output

    def test_json_output(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, ['analyze', path, '--json', '--min-hits', '3'])
        assert result.exit_code == 0

        data = json.loads(result.stdout)
        assert data['summary']['lines'] == 4
        assert data['summary']['uniqueSources'] == 2
        assert len(data['timeline']) == 2
        assert len(data['rows']) == 4
        assert len(data['anomalies']) == 1
        anomaly = data['anomalies'][0]
        assert anomaly['kind'] == 'sensitive_paths'
        assert anomaly['srcIp'] == '10.0.0.9'
        assert anomaly['hits'] == 3
        assert anomaly['uniquePrefixes'] == 1

    def test_human_output_lists_anomalies(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, ['analyze', path, '--min-hits', '3'])
        assert result.exit_code == 0
        assert 'Anomalies (1):' in result.output
        assert '[sensitive_paths]' in result.output
        assert 'Sensitive paths probed from 10.0.0.9: 3 hits' in result.output

    def test_custom_prefixes_replace_defaults(self, write_log):
        path = write_log(PROBE_LOG)
        args = ['analyze', path, '--json', '--min-hits', '1', '--sensitive-prefix', '/index']
        data = json.loads(self.runner.invoke(cli, args).stdout)
        assert [a['srcIp'] for a in data['anomalies']] == ['10.0.0.2']

    def test_env_settings(self, write_log, monkeypatch):
        monkeypatch.setenv('TENEXLOG_SENSITIVE_MIN_HITS', '2')
        path = write_log(PROBE_LOG)
        data = json.loads(self.runner.invoke(cli, ['analyze', path, '--json']).stdout)
        assert len(data['anomalies']) == 1

    def test_caps(self, write_log):
        path = write_log(PROBE_LOG)
        args = ['analyze', path, '--json', '--max-scan-lines', '3', '--keep-rows', '2']
        data = json.loads(self.runner.invoke(cli, args).stdout)
        assert data['summary']['lines'] == 3
        assert len(data['rows']) == 2
        assert data['note'].startswith('Rows are truncated for display (showing first 2)')

    def test_show_rows(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, ['analyze', path, '--rows', '2'])
        assert result.exit_code == 0
        assert 'Rows (first 2 of 4 retained):' in result.output
        assert '/admin/login' in result.output

    def test_stdin(self):
        data = ('\n'.join(PROBE_LOG) + '\n').encode()
        result = self.runner.invoke(cli, ['analyze', '-', '--json'], input=data)
        assert result.exit_code == 0
        assert json.loads(result.stdout)['summary']['lines'] == 4

    def test_line_too_long_exits_with_error(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, ['analyze', path, '--max-line-bytes', '10'])
        assert result.exit_code == 1
        assert f'Error: {path}' in result.output
        assert 'exceeds maximum length' in result.output

    def test_missing_file_is_usage_error(self, temp_dir):
        result = self.runner.invoke(cli, ['analyze', os.path.join(temp_dir, 'missing.tsv')])
        assert result.exit_code == 2

    def test_metrics_file(self, write_log, temp_dir):
        path = write_log(PROBE_LOG)
        metrics_path = os.path.join(temp_dir, 'tenexlog.prom')
        result = self.runner.invoke(cli, ['analyze', path, '--metrics-file', metrics_path])
        assert result.exit_code == 0
        with open(metrics_path) as f:
            content = f.read()
        assert 'tenexlog_analyze_requests_total' in content
        assert 'tenexlog_lines_scanned_total' in content


class TestGroup:
    def setup_method(self):
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_verbose_with_default_command(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, ['-v', path])
        assert result.exit_code == 0
        assert 'Lines: 4' in result.output

    def test_verbose_with_explicit_command(self, write_log):
        path = write_log(PROBE_LOG)
        result = self.runner.invoke(cli, ['--verbose', 'analyze', path])
        assert result.exit_code == 0
        assert 'Lines: 4' in result.output

    def test_verbose_alone_shows_help(self):
        result = self.runner.invoke(cli, ['-v'])
        assert result.exit_code == 0
        assert 'tenexlog prefixes' in result.output

    def test_no_args_shows_help(self):
        result = self.runner.invoke(cli, [])
        assert result.exit_code == 0
        assert 'tenexlog prefixes' in result.output

    def test_prefixes_default(self):
        result = self.runner.invoke(cli, ['prefixes'])
        assert result.exit_code == 0
        assert result.output.split() == list(DEFAULT_SENSITIVE_PREFIXES)

    def test_prefixes_from_env_json(self, monkeypatch):
        monkeypatch.setenv('TENEXLOG_SENSITIVE_PREFIXES', '/one,/two')
        result = self.runner.invoke(cli, ['prefixes', '--json'])
        assert json.loads(result.stdout) == {'prefixes': ['/one', '/two']}
