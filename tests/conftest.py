import os

import pytest

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


@pytest.fixture
def sample_path():
    return os.path.join(DATA_DIR, 'sample_dictionary.xml')


@pytest.fixture
def sample_xml(sample_path):
    with open(sample_path, 'r', encoding='utf-8') as f:
        return f.read()
