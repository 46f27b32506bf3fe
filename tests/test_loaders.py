"""
Test cases for log loaders: delimiter sniffing, source detection, Agilent and MD8475A parsing, and format errors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from loaders import LoaderFactory, LogSource, detect_delimiter, detect_source, load_text, read_log
from loaders.exceptions import EmptyLog, MissingColumns, UnsupportedSource
from loaders.parsers import parse_agilent, parse_md8475a

AGILENT = """Index;Timestamp;Message;Direction
1;10:00:00.000000;Attach Request;UL

2;10:00:05.5;Attach Request;UL
3;;Attach Accept;DL
4;10:00:06;;DL
"""

MD8475A = """Message Log
Simulation Start Time,2026/01/01 10:00:00
No.,Progress Time,Layer,Message
1,00:00:01.000,NAS,SM - Activate PDP Context Reject
---------------------------------------------
2,00:00:04.000,NAS,GMM - Detach Request
"""


@pytest.mark.parametrize("header,expected", [
    ("Timestamp,Message", ","),
    ("Timestamp\tMessage\tLayer", "\t"),
    ("a;b;c", ";"),
    ("a|b|c|d", "|"),
    ("Timestamp", ","),
    ("a,b;c", ","),
])
def test_detect_delimiter(header, expected):
    assert detect_delimiter(header) == expected


def test_detect_source():
    assert detect_source(MD8475A.splitlines()) == LogSource.md8475a
    assert detect_source(["No.,Progress Time,Message", "1,00:00:01,x"]) == LogSource.md8475a
    assert detect_source(["Timestamp,Message"]) == LogSource.agilent
    assert detect_source(["something else"]) == LogSource.agilent


def test_load_agilent_text():
    parsed = load_text(AGILENT)
    assert parsed.source == LogSource.agilent
    assert parsed.delimiter == ";"
    assert [(r.timestamp, r.message) for r in parsed.records] == [
        ("10:00:00.000000", "Attach Request"),
        ("10:00:05.5", "Attach Request"),
    ]


def test_load_md8475a_text():
    parsed = load_text(MD8475A.replace("\n", "\r\n"))
    assert parsed.source == LogSource.md8475a
    assert [(r.timestamp, r.message) for r in parsed.records] == [
        ("00:00:01.000", "SM - Activate PDP Context Reject"),
        ("00:00:04.000", "GMM - Detach Request"),
    ]


def test_missing_columns():
    with pytest.raises(MissingColumns):
        parse_agilent(["Time,Text", "10:00:00,x"])
    with pytest.raises(MissingColumns):
        parse_md8475a(["Timestamp,Message", "10:00:00,x"])
    with pytest.raises(MissingColumns):
        load_text("No.,Progress Time,Layer\n1,00:00:01,NAS", source="md8475a")


def test_empty_and_unsupported():
    with pytest.raises(EmptyLog):
        load_text("Timestamp,Message\n\n")
    with pytest.raises(UnsupportedSource):
        load_text(AGILENT, source="pcap")
    with pytest.raises(UnsupportedSource):
        LoaderFactory.create(LogSource.auto)


def test_read_log_from_file(tmp_path):
    path = tmp_path / "capture.csv"
    path.write_text(AGILENT, encoding="utf-8")
    parsed = read_log(path)
    assert len(parsed.records) == 2
