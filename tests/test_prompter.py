import pytest

from conftest import ok
from kubedeck.core.errors import NoResourcesError
from kubedeck.editor.document import editor_from_text
from kubedeck.resolution.kinds import ALL_KINDS, COMMON_KINDS
from kubedeck.resolution.prompter import (
    ALL_PICK,
    KindNameOptions,
    KindNamePrompter,
    contains_name,
    parse_names_from_kubectl_lines,
)
from kubedeck.resolution.resolver import KubeResolver
from kubedeck.shell.invoker import KubeInvoker

DEPLOYMENTS = "NAME   READY   UP-TO-DATE\nweb    1/1     1\napi    2/2     2\n"


@pytest.fixture
def kinds(shell, prompter):
    return KindNamePrompter(KubeInvoker(shell), KubeResolver(), prompter)


def test_parse_names():
    assert parse_names_from_kubectl_lines(DEPLOYMENTS) == ["web", "api"]
    assert parse_names_from_kubectl_lines("NAME READY\n") == []


def test_contains_name():
    assert contains_name("deployment/web")
    assert not contains_name("deployment")
    assert not contains_name("/web")
    assert not contains_name(None)


@pytest.mark.asyncio
async def test_typed_answer_is_used(kinds, prompter):
    prompter.inputs.append("svc/api")
    assert await kinds.prompt_kind_name(COMMON_KINDS, "get") == "svc/api"
    assert prompter.asked[0][1] == "What resource do you want to get?"


@pytest.mark.asyncio
async def test_dismissed_input_cancels(kinds, shell):
    assert await kinds.prompt_kind_name(COMMON_KINDS, "get") is None
    assert shell.calls == []


@pytest.mark.asyncio
async def test_empty_answer_walks_kind_then_name(kinds, shell, prompter):
    shell.on(["kubectl", "get", "deployment"], ok(DEPLOYMENTS))
    prompter.inputs.append("")
    prompter.picks += ["Deployment", "api"]

    assert await kinds.prompt_kind_name(COMMON_KINDS, "describe") == "deployment/api"


@pytest.mark.asyncio
async def test_all_pick_returns_bare_kind(kinds, shell, prompter):
    shell.on(["kubectl", "get", "deployment"], ok(DEPLOYMENTS))
    prompter.inputs.append("")
    prompter.picks.append(ALL_PICK)

    result = await kinds.prompt_kind_name([ALL_KINDS["deployment"]], "delete",
                                          KindNameOptions(name_optional=True))

    assert result == "deployment"
    assert prompter.questions("pick")[0][1] == ["web", "api", ALL_PICK]


@pytest.mark.asyncio
async def test_filtered_names_are_hidden(kinds, shell, prompter):
    shell.on(["kubectl", "get", "deployment"], ok(DEPLOYMENTS))
    prompter.inputs.append("")
    await kinds.prompt_kind_name([ALL_KINDS["deployment"]], "scale",
                                 KindNameOptions(filter_names=["web"]))
    assert prompter.questions("pick")[0][1] == ["api"]


@pytest.mark.asyncio
async def test_empty_cluster_is_reported(kinds, shell):
    shell.on(["kubectl", "get", "cronjob"], ok("No resources found in default namespace.\n"))
    with pytest.raises(NoResourcesError) as exc:
        await kinds.list_names(ALL_KINDS["cronjob"])
    assert exc.value.message == "No resources of type CronJob in cluster"
    assert exc.value.level == "info"


@pytest.mark.asyncio
async def test_open_document_skips_the_prompt(kinds, prompter):
    editor = editor_from_text("kind: Service\nmetadata:\n  name: api\n", "yaml")
    assert await kinds.find_kind_name_or_prompt(COMMON_KINDS, "get", editor=editor) == "service/api"
    assert prompter.asked == []


@pytest.mark.asyncio
async def test_unresolvable_document_falls_back_to_prompt(kinds, prompter):
    prompter.inputs.append("pod/x")
    editor = editor_from_text("foo: bar\n", "yaml")
    assert await kinds.find_kind_name_or_prompt(COMMON_KINDS, "get", editor=editor) == "pod/x"
