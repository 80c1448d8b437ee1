import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import failed, ok, pod_list
from kubedeck.core.errors import (
    BuildError,
    DebugError,
    LaunchError,
    PodNotReadyError,
    PollCancelledError,
    PushError,
)
from kubedeck.debug.orchestrator import DebugOrchestrator, PollPolicy
from kubedeck.pods.selector import PodSelector
from kubedeck.shell.docker import Docker, diagnose_push_error, sanitise_tag
from kubedeck.shell.git import Git
from kubedeck.shell.invoker import KubeInvoker

PHASE_QUERY = ["kubectl", "get", "pods", "shop-debug-7f9"]


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "shop"
    root.mkdir()
    return root


@pytest.fixture
def attacher():
    return AsyncMock(**{"attach.return_value": True})


@pytest.fixture
def make_orchestrator(shell, prompter, formatter, attacher, project, sleeps):
    async def fake_sleep(seconds):
        sleeps.append(seconds)

    def _make(policy=None, image_user=None, clock=None):
        kubectl = KubeInvoker(shell)
        extra = {"clock": clock} if clock else {}
        return DebugOrchestrator(
            kubectl, Docker(shell), Git(shell, cwd=project),
            PodSelector(kubectl, prompter, project), prompter, formatter, attacher,
            project_root=project, image_user=image_user,
            poll_policy=policy or PollPolicy(interval=1.0, timeout=None),
            sleep=fake_sleep, **extra,
        )
    return _make


def script_debug_run(shell, *phases):
    shell.on(["kubectl", "run", "shop-debug"], ok("deployment.apps/shop-debug created"))
    shell.on(["kubectl", "get", "pods", "-o", "json", "-l", "run=shop-debug"], ok(pod_list("shop-debug-7f9")))
    shell.on(PHASE_QUERY, *[ok(p) for p in phases])


@pytest.mark.asyncio
async def test_pending_then_running_attaches_once(make_orchestrator, shell, attacher, sleeps, formatter, project):
    script_debug_run(shell, "Pending", "Running")

    session = await make_orchestrator().do_debug("shop", "shop:latest", "node --inspect server.js")

    assert sleeps == [1.0]
    assert len(shell.calls_to(*PHASE_QUERY)) == 2
    attacher.attach.assert_awaited_once()
    configuration = attacher.attach.await_args.args[0]
    assert configuration["port"] == 5858
    assert configuration["localRoot"] == str(project)
    assert configuration["remoteRoot"] == "/"
    assert shell.spawned == [["kubectl", "port-forward", "shop-debug-7f9", "5858:5858", "8000:8000"]]
    assert session.pod_name == "shop-debug-7f9"
    assert "Debug pod running as: shop-debug-7f9" in formatter.of("info")


@pytest.mark.asyncio
async def test_run_command_shape(make_orchestrator, shell):
    script_debug_run(shell, "Running")
    await make_orchestrator().do_debug("shop", "me/shop:v1", "node debug server.js")
    assert shell.calls_to("kubectl", "run")[0] == [
        "kubectl", "run", "shop-debug", "--image=me/shop:v1", "-i", "--attach=false",
        "--", "node", "debug", "server.js",
    ]


@pytest.mark.asyncio
async def test_failed_run_stops_the_workflow(make_orchestrator, shell, attacher):
    shell.on(["kubectl", "run"], failed("AlreadyExists"))
    with pytest.raises(DebugError) as exc:
        await make_orchestrator().do_debug("shop", "shop:latest", "node server.js")
    assert exc.value.message == "Failed to start debug container: AlreadyExists"
    attacher.attach.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_debug_pod(make_orchestrator, shell):
    shell.on(["kubectl", "run"], ok())
    shell.on(["kubectl", "get", "pods", "-o", "json"], ok(pod_list()))
    with pytest.raises(DebugError) as exc:
        await make_orchestrator().do_debug("shop", "shop:latest", "node server.js")
    assert exc.value.message == "Failed to find debug pod."


@pytest.mark.asyncio
async def test_poll_gives_up_after_max_attempts(make_orchestrator, shell, sleeps, attacher):
    script_debug_run(shell, "Pending")
    orchestrator = make_orchestrator(PollPolicy(interval=0.5, timeout=None, max_attempts=3))

    with pytest.raises(PodNotReadyError):
        await orchestrator.do_debug("shop", "shop:latest", "node server.js")

    assert len(shell.calls_to(*PHASE_QUERY)) == 3
    assert sleeps == [0.5, 0.5]
    attacher.attach.assert_not_awaited()


@pytest.mark.asyncio
async def test_poll_gives_up_after_timeout(make_orchestrator, shell):
    shell.on(PHASE_QUERY, ok("ContainerCreating"))
    ticks = iter([0.0, 1.0, 2.0, 3.5])
    orchestrator = make_orchestrator(PollPolicy(interval=1.0, timeout=3.0), clock=lambda: next(ticks))

    with pytest.raises(PodNotReadyError):
        await orchestrator.wait_for_running_pod("shop-debug-7f9")

    assert len(shell.calls_to(*PHASE_QUERY)) == 3


@pytest.mark.asyncio
async def test_cancelled_poll(make_orchestrator, shell):
    cancel = asyncio.Event()
    cancel.set()
    with pytest.raises(PollCancelledError):
        await make_orchestrator().wait_for_running_pod("shop-debug-7f9", cancel=cancel)
    assert shell.calls == []


@pytest.mark.asyncio
async def test_phase_query_failure_is_not_retried(make_orchestrator, shell, sleeps):
    shell.on(PHASE_QUERY, failed("pods not found"))
    with pytest.raises(DebugError):
        await make_orchestrator().wait_for_running_pod("shop-debug-7f9")
    assert sleeps == []


@pytest.mark.asyncio
async def test_expose_after_attach(make_orchestrator, shell, prompter, formatter):
    script_debug_run(shell, "Running")
    shell.on(["kubectl", "expose"], ok("service/shop-debug exposed"))
    prompter.confirms.append("Expose Service")
    prompter.inputs.append("8080")

    await make_orchestrator().do_debug("shop", "shop:latest", "node server.js")

    assert shell.calls_to("kubectl", "expose")[0] == [
        "kubectl", "expose", "deployment", "shop-debug", "--type=LoadBalancer", "--port=8080",
    ]
    assert any(m.startswith("Deployment exposed.") for m in formatter.of("info"))


@pytest.mark.asyncio
async def test_remove_debug_with_nothing_to_clean(make_orchestrator, shell, prompter, formatter):
    shell.on(["kubectl", "get"], failed("NotFound"))

    assert await make_orchestrator().remove_debug("app") == []

    assert "app-debug: nothing to clean up" in formatter.of("info")
    assert shell.calls_to("kubectl", "delete") == []
    assert prompter.asked == []


@pytest.mark.asyncio
async def test_remove_debug_with_only_service(make_orchestrator, shell, prompter):
    shell.on(["kubectl", "get", "deployments"], failed("NotFound"))
    shell.on(["kubectl", "get", "services"], ok("app-debug LoadBalancer"))
    shell.on(["kubectl", "delete"], ok())
    prompter.confirms.append("Delete")

    assert await make_orchestrator().remove_debug("app") == ["service"]

    assert prompter.asked[0][1] == "This will delete service app-debug"
    assert shell.calls_to("kubectl", "delete") == [["kubectl", "delete", "service", "app-debug"]]


@pytest.mark.asyncio
async def test_remove_debug_deletes_service_before_deployment(make_orchestrator, shell, prompter):
    shell.on(["kubectl", "get"], ok())
    shell.on(["kubectl", "delete"], ok())
    prompter.confirms.append("Delete")

    assert await make_orchestrator().remove_debug("app") == ["service", "deployment"]
    assert prompter.asked[0][1] == "This will delete deployment and service app-debug"


@pytest.mark.asyncio
async def test_remove_debug_declined(make_orchestrator, shell):
    shell.on(["kubectl", "get"], ok())
    assert await make_orchestrator().remove_debug("app") == []
    assert shell.calls_to("kubectl", "delete") == []


@pytest.mark.asyncio
async def test_remove_debug_without_kubectl(make_orchestrator, shell, prompter, formatter):
    shell.on(["kubectl"], None)

    with pytest.raises(LaunchError, match="Unable to call kubectl"):
        await make_orchestrator().remove_debug("app")

    assert formatter.of("info") == []
    assert prompter.asked == []


def test_push_diagnosis():
    assert diagnose_push_error(1, "denied: requested access", "me") == \
        "Failed to push to Docker Hub. Try running docker login."
    assert diagnose_push_error(1, "denied: requested access") == \
        "Failed to push to Docker Hub. Try setting docker.image_user."
    assert diagnose_push_error(1, "network unreachable", "me") == "Image push failed."


def test_sanitise_tag():
    assert sanitise_tag("My App") == "my-app"
    assert sanitise_tag("web_api.v2") == "web_api.v2"


@pytest.mark.asyncio
async def test_version_without_git(make_orchestrator, shell):
    assert await make_orchestrator().find_version() == "latest"
    assert shell.calls == []


@pytest.mark.asyncio
async def test_version_from_git(make_orchestrator, shell, project):
    (project / ".git").mkdir()
    shell.on(["git", "describe"], ok("a1b2c3d-dirty\n"))
    assert await make_orchestrator().find_version() == "a1b2c3d-dirty"
    assert shell.cwds[0] == project


@pytest.mark.asyncio
async def test_version_when_git_fails(make_orchestrator, shell, project):
    (project / ".git").mkdir()
    shell.on(["git", "describe"], failed("fatal: not a git repository"))
    assert await make_orchestrator().find_version() == "error"


@pytest.mark.asyncio
async def test_image_name_with_user(make_orchestrator):
    assert await make_orchestrator(image_user="me").find_name_and_image() == ("shop", "me/shop:latest")


@pytest.mark.asyncio
async def test_build_failure(make_orchestrator, shell):
    shell.on(["docker", "build"], failed("no Dockerfile"))
    with pytest.raises(BuildError):
        await make_orchestrator().build_and_push("shop:latest")
    assert shell.calls_to("docker", "push") == []


@pytest.mark.asyncio
async def test_docker_missing(make_orchestrator, shell):
    shell.on(["docker"], None)
    with pytest.raises(LaunchError) as exc:
        await make_orchestrator().build_and_push("shop:latest")
    assert exc.value.message == "Docker Build failed; unable to call Docker."


@pytest.mark.asyncio
async def test_push_denied(make_orchestrator, shell, project):
    shell.on(["docker", "build"], ok())
    shell.on(["docker", "push"], failed("denied: requested access to the resource is denied"))

    with pytest.raises(PushError) as exc:
        await make_orchestrator(image_user="me").build_and_push("me/shop:latest")

    assert exc.value.message.startswith("Failed to push to Docker Hub. Try running docker login.")
    assert shell.calls_to("docker", "build")[0] == ["docker", "build", "-t", "me/shop:latest", "."]
    assert shell.cwds[0] == project
