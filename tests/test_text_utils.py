import pytest

from keyswipe.text_utils import calculate_corpus_coverage, load_corpus, validate_corpus


def test_load_corpus(tmp_path):
    path = tmp_path / 'corpus.txt'
    path.write_text('bad cab\n', encoding='utf-8')
    assert load_corpus(path) == 'bad cab\n'

    with pytest.raises(FileNotFoundError):
        load_corpus(tmp_path / 'missing.txt')


def test_coverage(tiny_layout):
    coverage = calculate_corpus_coverage('ab ab!', tiny_layout.position_map())
    assert coverage['total_chars'] == 6
    assert coverage['placeable_chars'] == 4
    assert coverage['coverage'] == pytest.approx(4 / 6)
    assert coverage['unsupported_chars'] == [(' ', 1), ('!', 1)]


def test_empty_coverage(tiny_layout):
    assert calculate_corpus_coverage('', tiny_layout.position_map())['coverage'] == 0.0


def test_validate_corpus(tiny_layout):
    position_map = tiny_layout.position_map()
    assert validate_corpus('bad cab', position_map) == []
    assert validate_corpus('', position_map) == ['Corpus is empty']

    issues = validate_corpus('a!!!!!!', position_map)
    assert len(issues) == 1
    assert 'typeable' in issues[0]


def test_short_corpus(tiny_layout):
    position_map = tiny_layout.position_map()
    issues = validate_corpus('ab', position_map, min_length=4)
    assert issues == ['Corpus too short: 2 characters (minimum 4)']
    assert validate_corpus('abcd', position_map, min_length=4) == []
