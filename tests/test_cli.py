import sys

import pandas as pd
import pytest
import yaml

import optimize_layout
from keyswipe.cli_utils import parse_args

CORPUS = 'the quick brown fox jumps over the lazy dog.\n'


@pytest.fixture
def corpus_file(tmp_path):
    path = tmp_path / 'corpus.txt'
    path.write_text(CORPUS * 3, encoding='utf-8')
    return path


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, 'argv', ['optimize_layout.py', *argv])
    return optimize_layout.main()


def test_parse_refine_options():
    args = parse_args(['refine', 'corpus.txt', '--top', '3', '--swaps', '2',
                       '--rounds', '4', '--csv', 'out.csv', '--keyboard', 'messagease_3x3'])
    assert args.command == 'refine'
    assert args.top == 3
    assert args.swaps == 2
    assert args.rounds == 4
    assert args.csv_file == 'out.csv'
    assert args.keyboard == 'messagease_3x3'


def test_parse_defaults():
    args = parse_args(['show'])
    assert args.keyboard == 'swipe_3x6'
    assert args.layout is None
    assert args.output_format == 'detailed'


def test_swaps_restricted():
    with pytest.raises(SystemExit):
        parse_args(['refine', 'corpus.txt', '--swaps', '3'])


def test_show(monkeypatch, capsys):
    assert _run(monkeypatch, 'show', '--keyboard', 'messagease_3x3', '--quiet') == 0
    out = capsys.readouterr().out
    assert out.startswith('messagease_3x3: classic')
    assert '[ space ]' in out


def test_run_ref(monkeypatch, capsys, corpus_file):
    assert _run(monkeypatch, 'run-ref', str(corpus_file), '--quiet') == 0
    out = capsys.readouterr().out
    assert 'Reference: initial' in out
    assert 'Total penalty' in out
    assert 'Swipe completion' in out


def test_run_ref_score_only(monkeypatch, capsys, corpus_file):
    assert _run(monkeypatch, 'run-ref', str(corpus_file), '--output-format', 'score_only',
                '--keyboard', 'messagease_3x3', '--quiet') == 0
    total, average = capsys.readouterr().out.splitlines()[-1].split()
    assert float(total) > 0
    assert float(average) == pytest.approx(float(total) / len(CORPUS * 3), rel=1e-4)


def test_refine_writes_csv(monkeypatch, capsys, corpus_file, tmp_path):
    csv_path = tmp_path / 'refined.csv'
    assert _run(monkeypatch, 'refine', str(corpus_file), '--keyboard', 'messagease_3x3',
                '--top', '2', '--rounds', '1', '--csv', str(csv_path), '--quiet') == 0

    out = capsys.readouterr().out
    assert '#1' in out and '#2' in out

    df = pd.read_csv(csv_path)
    assert len(df) == 2
    assert list(df['primary_score']) == sorted(df['primary_score'])


def test_missing_corpus(monkeypatch, capsys, tmp_path):
    assert _run(monkeypatch, 'run-ref', str(tmp_path / 'missing.txt'), '--quiet') == 1
    assert 'Error' in capsys.readouterr().err


def test_empty_corpus(monkeypatch, capsys, tmp_path):
    path = tmp_path / 'empty.txt'
    path.write_text('', encoding='utf-8')
    assert _run(monkeypatch, 'run-ref', str(path), '--quiet') == 1


def test_unknown_keyboard(monkeypatch, capsys):
    assert _run(monkeypatch, 'show', '--keyboard', 'qwerty', '--quiet') == 1
    assert 'qwerty' in capsys.readouterr().err


def test_summary_format(monkeypatch, capsys, corpus_file):
    assert _run(monkeypatch, 'run-ref', str(corpus_file), '--output-format', 'summary', '--quiet') == 0
    out = capsys.readouterr().out
    assert 'Scorer: swipe_3x6_scorer' in out
    assert 'Average per character' in out


def test_quartad_listing(monkeypatch, capsys, corpus_file):
    assert _run(monkeypatch, 'run-ref', str(corpus_file), '--quartads', '3',
                '--output-format', 'score_only', '--quiet') == 0
    out = capsys.readouterr().out
    listing = out.split('Most frequent windows')[1].splitlines()
    assert listing[1].split() == ['window', 'length', 'count']
    assert len(listing) == 5


def test_show_cells_round_trip(monkeypatch, capsys, config_path):
    from keyswipe.config_loader import load_keyboard

    assert _run(monkeypatch, 'show', '--keyboard', 'messagease_3x3', '--cells', '--quiet') == 0
    cells = yaml.safe_load(capsys.readouterr().out)
    keyboard = load_keyboard('messagease_3x3', config_path)
    assert cells == {'classic': keyboard.layout_cells['classic']}


def test_refine_from_shuffled_start(monkeypatch, capsys, corpus_file, tmp_path):
    csv_path = tmp_path / 'shuffled.csv'
    argv = ['refine', str(corpus_file), '--keyboard', 'messagease_3x3', '--rounds', '1',
            '--shuffle', '40', '--seed', '3', '--csv', str(csv_path), '--quiet']
    assert _run(monkeypatch, *argv) == 0
    first = pd.read_csv(csv_path)['layout'][0]

    assert _run(monkeypatch, *argv) == 0
    assert pd.read_csv(csv_path)['layout'][0] == first
    assert '#1' in capsys.readouterr().out


def test_unexpected_error(monkeypatch, capsys):
    def broken(*args, **kwargs):
        raise RuntimeError('disk on fire')

    monkeypatch.setattr(optimize_layout, 'load_keyboard', broken)
    assert _run(monkeypatch, 'show', '--quiet') == 1
    err = capsys.readouterr().err
    assert 'Unexpected error: disk on fire' in err
    assert 'Traceback' in err


def test_error_handler_keeps_name():
    assert optimize_layout.main.__name__ == 'main'
