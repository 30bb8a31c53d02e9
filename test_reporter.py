"""Tests for log and recording reporters."""

import logging
from decimal import Decimal

import pandas as pd
import pytest

from papersim.config import MarketConfig
from papersim.core.market_session import MarketSession
from papersim.core.models import Quote, QuotePair
from papersim.core.session_runner import RunnerState, SessionResult
from papersim.metrics.reporter import CompositeReporter, LogReporter, RecordingReporter, Reporter


@pytest.fixture
def session(market_config):
    return MarketSession.seeded('AAABBB', market_config, Decimal(105), Decimal(95))


@pytest.fixture
def logger():
    return logging.getLogger('papersim.test.reporter')


def test_log_lines_for_no_fill(session, logger, caplog, make_trade):
    event = session.process_batch([make_trade(2, 202)])

    with caplog.at_level(logging.INFO, logger=logger.name):
        LogReporter(logger).report(event)

    messages = [r.getMessage() for r in caplog.records if r.name == logger.name]
    assert messages == [
        'AAABBB: last_price=101.00000000',
        'AAABBB: current_value=510.000000 base_ratio=0.990 counter_ratio=0.009',
        'AAABBB: ask_price=101.009803921 bid_price=100.009803922 spread=0.9900%',
    ]


def test_log_lines_for_round_trip(session, logger, caplog, make_trade):
    session.quotes = QuotePair(ask=Quote(Decimal(105), Decimal(3)), bid=Quote(Decimal(95), Decimal(4)))
    sold = session.process_batch([make_trade(2, 220)])
    session.quotes = QuotePair(ask=Quote(Decimal(200), Decimal(1)), bid=Quote(Decimal(95), Decimal(4)))
    bought = session.process_batch([make_trade(5, 450)])

    with caplog.at_level(logging.INFO, logger=logger.name):
        reporter = LogReporter(logger)
        reporter.report(sold)
        reporter.report(bought)

    messages = [r.getMessage() for r in caplog.records if r.name == logger.name]
    assert 'AAABBB: sold 2@105 last_price=110.00000000' in messages
    assert 'AAABBB: bought 4@90.00000000 last_price=90.00000000' in messages
    assert any('avg_buy_return=60' in m for m in messages)


def test_degenerate_event_logs_warning(logger, caplog, make_trade):
    config = MarketConfig(spread=Decimal(1), order_volume=Decimal(1),
                          base_balance=Decimal(0), counter_balance=Decimal(0))
    event = MarketSession.seeded('EMPTY', config, Decimal(105), Decimal(95)).process_batch(
        [make_trade(2, 202)])

    with caplog.at_level(logging.INFO, logger=logger.name):
        LogReporter(logger).report(event)

    warnings = [r for r in caplog.records
                if r.name == logger.name and r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert 'quotes zeroed' in warnings[0].getMessage()


def test_session_lifecycle_lines(logger, caplog):
    reporter = LogReporter(logger)

    with caplog.at_level(logging.INFO, logger=logger.name):
        reporter.session_started('AAABBB', Decimal(105), Decimal(95))
        reporter.session_finished(SessionResult('AAABBB', RunnerState.CLOSED, batches_processed=3))
        reporter.session_finished(SessionResult('CCCDDD', RunnerState.FAILED, error=RuntimeError('x')))

    assert caplog.records[0].getMessage() == 'AAABBB: seeded quotes ask=105 bid=95'
    assert caplog.records[1].getMessage() == 'AAABBB: finished closed after 3 batches'
    assert caplog.records[2].levelno == logging.ERROR


def test_recording_reporter_exports(tmp_path, session, make_trade):
    recorder = RecordingReporter()
    recorder.report(session.process_batch([make_trade(2, 202)]))
    recorder.report(session.process_batch([make_trade(1, 110)]))

    df = recorder.to_dataframe()
    assert len(df) == 2
    assert df['side'].tolist() == ['none', 'sold']
    assert df['ask_price'][0] == Decimal('101.009803921')

    path = recorder.save_results(tmp_path / 'out' / 'events.csv')
    saved = pd.read_csv(path, dtype=str)

    assert list(saved.columns) == list(df.columns)
    assert Decimal(saved['fill_volume'][1]) == Decimal(1)
    assert saved['base_ratio'][0] == '0.990196078'
    assert recorder.events_for('CCCDDD') == []


def test_composite_forwards_in_order(session, make_trade):
    calls = []

    class Tap(Reporter):
        def __init__(self, name):
            self.name = name

        def report(self, event):
            calls.append(self.name)

    CompositeReporter([Tap('a'), Tap('b')]).report(session.process_batch([make_trade(2, 202)]))

    assert calls == ['a', 'b']
