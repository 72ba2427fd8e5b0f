import pytest


class RecordingExecutor:
    """Stands in for PostgresExecutor: records statements, returns canned rows."""

    def __init__(self, rows=None):
        self.rows = rows if rows is not None else []
        self.calls = []

    def execute(self, template, params=()):
        self.calls.append((template, tuple(params)))
        return [dict(row) for row in self.rows]

    @property
    def last_template(self):
        return self.calls[-1][0]

    @property
    def last_params(self):
        return self.calls[-1][1]


@pytest.fixture()
def executor():
    return RecordingExecutor()


@pytest.fixture()
def executor_with_rows():
    def make(rows):
        return RecordingExecutor(rows)
    return make
