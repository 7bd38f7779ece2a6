import pytest

from rle import rle
from shared import codec


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / 'data.txt'
    path.write_bytes(b'hello ' + b'f' * 8 + b' ' + b'0' * 6 + b'\n')
    return path


def test_encode_then_decode(sample):
    original = sample.read_bytes()

    assert rle.main([str(sample)]) == codec.EXIT_OK
    encoded = sample.with_name('data.txt.rle')
    assert encoded.read_bytes() == b'hello |f8| |06|\n'

    sample.unlink()
    assert rle.main(['-d', str(encoded)]) == codec.EXIT_OK
    assert sample.read_bytes() == original


def test_outfile(sample, tmp_path):
    assert rle.main([str(sample), '-o', str(tmp_path / 'packed')]) == codec.EXIT_OK
    assert (tmp_path / 'packed.rle').is_file()


def test_clobber(sample):
    assert rle.main(['-c', str(sample)]) == codec.EXIT_OK
    assert not sample.exists()
    assert sample.with_name('data.txt.rle').is_file()


def test_options(tmp_path):
    path = tmp_path / 'a.txt'
    path.write_bytes(b'aaab')

    assert rle.main(['--triggers', 'a', '--threshold', '2', str(path)]) == codec.EXIT_OK
    assert (tmp_path / 'a.txt.rle').read_bytes() == b'|a3|b'


@pytest.mark.parametrize('argv', [
    ['--threshold', 'x'],
    ['--threshold', '-1'],
    ['--triggers', 'f|'],
    ['--triggers', 'é'],
    ['-d', '-t'],
])
def test_bad_arguments(sample, argv):
    with pytest.raises(SystemExit):
        rle.main(argv + [str(sample)])


def test_encode_encoded(tmp_path, capsys):
    path = tmp_path / 'data.rle'
    path.write_bytes(b'abc')

    assert rle.main([str(path)]) == codec.EXIT_ENCODED
    assert 'RLE error: attempting to encode already encoded file' in capsys.readouterr().out


def test_decode_plain(sample, capsys):
    assert rle.main(['-d', str(sample)]) == codec.EXIT_NOT_ENCODED
    assert "RLE error: attempting to decode non '.rle' file" in capsys.readouterr().out


def test_decode_malformed(tmp_path, capsys):
    path = tmp_path / 'bad.rle'
    path.write_bytes(b'ab|f6')

    assert rle.main(['-d', str(path)]) == codec.EXIT_MALFORMED
    assert 'unterminated run token at offset 2' in capsys.readouterr().out
    assert not (tmp_path / 'bad').exists()


def test_write_failure(tmp_path, capsys):
    path = tmp_path / 'data.rle'
    path.write_bytes(b'|f6|')

    argv = ['-d', str(path), '-o', str(tmp_path / 'missing' / 'out')]
    assert rle.main(argv) == codec.EXIT_IO
    assert capsys.readouterr().out.startswith('RLE error:')


def test_missing_input_skipped(tmp_path):
    assert rle.main([str(tmp_path / 'nothing.txt')]) == codec.EXIT_OK
    assert not (tmp_path / 'nothing.txt.rle').exists()


def test_test_mode(sample, capsys):
    assert rle.main(['-t', str(sample)]) == codec.EXIT_OK

    stdout = capsys.readouterr().out
    assert 'Original Size: 22 bytes' in stdout
    assert 'Compressed Size: 16 bytes' in stdout
    assert 'Compression Ratio: 1.38' in stdout
    assert 'Decompression successful' in stdout
    assert sample.with_name('data.txt.rle').read_bytes() == b'hello |f8| |06|\n'


def test_test_mode_keeps_input(sample):
    assert rle.main(['-t', '-c', str(sample)]) == codec.EXIT_OK
    assert sample.exists()


def test_test_mode_not_saved(tmp_path):
    path = tmp_path / 'plain.txt'
    path.write_bytes(b'abc')

    assert rle.main(['-t', '-v', str(path)]) == codec.EXIT_OK
    assert not (tmp_path / 'plain.txt.rle').exists()


def test_test_mode_mismatch(tmp_path, capsys):
    path = tmp_path / 'pipes.txt'
    path.write_bytes(b'|f3|')

    assert rle.main(['-t', str(path)]) == codec.EXIT_MISMATCH
    assert 'does not survive the round trip' in capsys.readouterr().out


def test_test_mode_sentinel(tmp_path):
    path = tmp_path / 'pipes.txt'
    path.write_bytes(b'a|b')

    assert rle.main(['-t', str(path)]) == codec.EXIT_MALFORMED


def test_verbosity(sample, capsys):
    assert rle.main(['-vv', str(sample)]) == codec.EXIT_OK

    out = capsys.readouterr().out
    assert '22B -> <RLE> ->' in out
    assert '16B' in out
    assert '% delta]' in out


def test_decode_huge_run(tmp_path, capsys):
    path = tmp_path / 'big.rle'
    path.write_bytes(b'ab|f99999999999999999999|')

    assert rle.main(['-d', str(path)]) == codec.EXIT_MALFORMED
    assert 'bad run length' in capsys.readouterr().out
    assert not (tmp_path / 'big').exists()


def test_test_mode_ignores_stale_output(tmp_path, capsys):
    path = tmp_path / 'data.txt'
    path.write_bytes(b'f' * 10)
    assert rle.main([str(path)]) == codec.EXIT_OK
    capsys.readouterr()

    path.write_bytes(b'abc')
    assert rle.main(['-t', '-v', str(path)]) == codec.EXIT_OK

    out = capsys.readouterr().out
    assert 'Compressed data not saved.' in out
    assert '<RLE>' not in out
