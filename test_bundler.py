"""Tests for bundling staged volume archives."""

import tarfile

import pytest

from bundler import bundle_staging_dir, format_size


def test_bundle_contains_every_archive_and_removes_staging(tmp_path):
    staging = tmp_path / '2026-10-16'
    staging.mkdir()
    (staging / 'pgdata.tar.gz').write_bytes(b'pg')
    (staging / 'redis.tar.gz').write_bytes(b'redis')
    output = tmp_path / '2026-10-16.tar.gz'

    result = bundle_staging_dir(staging, output)

    assert result == output
    assert output.exists()
    assert not staging.exists()
    with tarfile.open(output, 'r:gz') as tar:
        names = sorted(tar.getnames())
        assert names == ['./pgdata.tar.gz', './redis.tar.gz']
        assert tar.extractfile('./redis.tar.gz').read() == b'redis'


def test_bundle_missing_staging_dir_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        bundle_staging_dir(tmp_path / 'missing', tmp_path / 'out.tar.gz')


def test_format_size():
    assert format_size(0) == "0 B"
    assert format_size(512) == "512.00 B"
    assert format_size(1536) == "1.50 KB"
