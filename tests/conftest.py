import pytest


@pytest.fixture
def minimal_lines():
    return ["100", "900"]


@pytest.fixture
def sample_lines():
    # Two meters, out-of-order and duplicate dates on the first
    return [
        "100",
        "200,NEM1201009,KWH",
        "300,20050301,0,E",
        "300,20050303,-6.1,A",
        "300,20050302,0,A",
        "300,20050301,32.0,A",
        "200,NEM1201010,KWH",
        "300,20050301,14.9,A",
        "300,20050302,1.5E+2,E",
        "900",
    ]


@pytest.fixture
def sample_file(tmp_path, sample_lines):
    path = tmp_path / "SimpleNem12.csv"
    path.write_text("\n".join(sample_lines) + "\n", encoding="utf-8")
    return path
