import pytest

from github_hooks.core.domain.exceptions import Failure, FailureKind
from github_hooks.core.domain.models import RepositoryReference
from github_hooks.core.domain.repository_ref import normalize_host, resolve_repository


WIDGETS = RepositoryReference(host="github.com", owner="acme", repo="widgets")


@pytest.mark.parametrize(
    "opaque_id",
    [
        "https://github.com/acme/widgets",
        "https://github.com/acme/widgets.git",
        "https://GitHub.com/acme/widgets/",
        "https://www.github.com/acme/widgets",
        "http://github.com/acme/widgets",
        "ssh://git@github.com/acme/widgets.git",
        "git@github.com:acme/widgets.git",
        "git://github.com/acme/widgets.git",
        "host=github.com,owner=acme,repo=widgets",
        "  host=github.com, owner=acme, repo=widgets  ",
    ],
)
def test_resolves_supported_forms(opaque_id):
    assert resolve_repository(opaque_id) == WIDGETS


def test_enterprise_host_keeps_port():
    ref = resolve_repository("https://ghe.acme.io:8443/team/app")
    assert ref == RepositoryReference(host="ghe.acme.io:8443", owner="team", repo="app")
    assert str(ref) == "ghe.acme.io:8443/team/app"
    assert ref.slug == "team/app"


@pytest.mark.parametrize(
    "opaque_id",
    [
        None,
        "",
        "   ",
        "acme/widgets",
        "https://github.com/acme",
        "https://github.com/acme/widgets/tree/main",
        "https://github.com/acme/widgets?tab=readme",
        "ftp://github.com/acme/widgets",
        "host=github.com,owner=acme",
        "host=github.com,owner=acme,repo=widgets,repo=other",
        "https://github.com/-acme/widgets",
        "https://github.com/acme/..",
        "totally not a repository",
    ],
)
def test_rejects_non_github_references(opaque_id):
    result = resolve_repository(opaque_id)
    assert isinstance(result, Failure)
    assert result.kind is FailureKind.NOT_A_GITHUB_REFERENCE
    assert result.code == 400
    assert result.message.startswith("Not a GitHub repository reference")


def test_failure_message_echoes_input():
    result = resolve_repository("acme/widgets")
    assert result.message == "Not a GitHub repository reference: 'acme/widgets'"


class TestNormalizeHost:
    """Host comparison used to match connections against repositories."""

    def test_strips_scheme_and_path(self):
        assert normalize_host("https://GitHub.com/") == "github.com"

    def test_api_host_is_github(self):
        assert normalize_host("https://api.github.com") == "github.com"

    def test_drops_userinfo_and_trailing_dot(self):
        assert normalize_host("https://bot@ghe.acme.io/path") == "ghe.acme.io"
        assert normalize_host("GitHub.com.") == "github.com"

    def test_distinct_servers_stay_distinct(self):
        assert normalize_host("github.com") != normalize_host("ghe.acme.io")
