import pytest

FACTORIAL = """function computeFactorial(n) {
  if (n <= 1) return 1;
  return n * computeFactorial(n - 1);
}

function executeMain() {
  return computeFactorial(5);
}
"""


@pytest.fixture
def factorial_source():
    return FACTORIAL


@pytest.fixture
def client():
    from app import app

    app.config.update(TESTING=True)
    with app.test_client() as client:
        yield client
