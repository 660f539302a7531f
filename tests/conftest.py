import pytest


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    """Point the home directory and the working directory at a scratch dir.

    Configuration is looked up in both the current working directory and
    the user's home directory, so neither may leak a real ``.plmhelperrc``
    into a test.
    """
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.chdir(work)
    yield
