import asyncio
import random

import pytest

from squad_token.compositor import Action
from squad_token.config import DEFAULT_CONFIG
from squad_token.renderer.texture import BackgroundLoadError
from squad_token.visual import Composited, Original
from tests.test_utils import FakeRenderer, make_host, make_icon, place_token


@pytest.mark.asyncio
async def test_refresh_non_squad_original_is_noop() -> None:
    host = make_host()
    token = place_token(host, "a")
    before = host.canvas.get_displayed_image(token)
    assert await host.squad.on_refresh_token(token) is Action.NOOP
    assert host.canvas.get_displayed_image(token) is before
    assert host.canvas.redraws[token.id] == 0
    assert host.renderer.loaded == []


@pytest.mark.asyncio
async def test_apply_installs_composite_with_back_reference() -> None:
    host = make_host()
    icon = make_icon(100, 140)
    token = place_token(host, "a", icon)
    original = host.canvas.get_displayed_image(token)
    host.squad.toggle(["a"])

    assert await host.squad.on_refresh_token(token) is Action.APPLY

    visual = host.canvas.get_displayed_image(token)
    assert isinstance(visual, Composited)
    assert visual.source is original
    assert visual.image.size == (490, 490)
    assert host.canvas.redraws[token.id] == 1
    assert host.renderer.loaded == [DEFAULT_CONFIG.default_background]
    scene = host.renderer.scenes[0]
    assert [s.texture for s in scene.ordered()[1:]] == [icon] * 4


@pytest.mark.asyncio
async def test_apply_is_idempotent() -> None:
    host = make_host()
    token = place_token(host, "a")
    host.squad.toggle(["a"])
    await host.squad.on_refresh_token(token)
    composited = host.canvas.get_displayed_image(token)

    for _ in range(3):
        assert await host.squad.on_refresh_token(token) is Action.NOOP
    assert host.canvas.get_displayed_image(token) is composited
    assert len(host.renderer.scenes) == 1
    assert host.canvas.redraws[token.id] == 1


@pytest.mark.asyncio
async def test_round_trip_restores_original_identity() -> None:
    host = make_host()
    icon = make_icon(33, 21)
    token = place_token(host, "a", icon)
    original = host.canvas.get_displayed_image(token)

    host.squad.toggle(["a"])
    await host.squad.on_refresh_token(token)
    host.squad.toggle(["a"])
    assert await host.squad.on_refresh_token(token) is Action.REVERT

    restored = host.canvas.get_displayed_image(token)
    assert restored is original
    assert restored.image is icon
    assert host.canvas.redraws[token.id] == 2


@pytest.mark.asyncio
async def test_revert_does_not_load_background() -> None:
    host = make_host()
    token = place_token(host, "a")
    host.squad.toggle(["a"])
    await host.squad.on_refresh_token(token)
    host.squad.toggle(["a"])
    await host.squad.on_refresh_token(token)
    assert len(host.renderer.loaded) == 1


@pytest.mark.asyncio
async def test_load_failure_leaves_token_unchanged() -> None:
    host = make_host(FakeRenderer(fail=True))
    token = place_token(host, "a")
    before = host.canvas.get_displayed_image(token)
    host.squad.toggle(["a"])

    assert await host.squad.on_refresh_token(token) is Action.NOOP

    assert host.canvas.get_displayed_image(token) is before
    assert host.canvas.redraws[token.id] == 0
    assert host.renderer.scenes == []
    assert len(host.errors) == 1
    message, exc = host.errors[0]
    assert DEFAULT_CONFIG.default_background in message
    assert isinstance(exc, BackgroundLoadError)


@pytest.mark.asyncio
async def test_load_failure_is_retried_on_next_refresh() -> None:
    renderer = FakeRenderer(fail=True)
    host = make_host(renderer)
    token = place_token(host, "a")
    host.squad.toggle(["a"])
    await host.squad.on_refresh_token(token)
    renderer.fail = False
    assert await host.squad.on_refresh_token(token) is Action.APPLY
    assert isinstance(host.canvas.get_displayed_image(token), Composited)


@pytest.mark.asyncio
async def test_load_failure_does_not_affect_other_tokens() -> None:
    renderer = FakeRenderer()
    host = make_host(renderer)
    broken = place_token(host, "a")
    healthy = place_token(host, "b")
    host.squad.toggle(["a", "b"])

    renderer.fail = True
    await host.squad.on_refresh_token(broken)
    renderer.fail = False
    await host.squad.on_refresh_token(healthy)

    assert isinstance(host.canvas.get_displayed_image(broken), Original)
    assert isinstance(host.canvas.get_displayed_image(healthy), Composited)


@pytest.mark.asyncio
async def test_concurrent_refreshes_of_one_token_apply_once() -> None:
    renderer = FakeRenderer()
    renderer.gate = asyncio.Event()
    host = make_host(renderer)
    token = place_token(host, "a")
    original = host.canvas.get_displayed_image(token)
    host.squad.toggle(["a"])

    first = asyncio.create_task(host.squad.on_refresh_token(token))
    second = asyncio.create_task(host.squad.on_refresh_token(token))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    renderer.gate.set()
    results = await asyncio.gather(first, second)

    assert results == [Action.APPLY, Action.NOOP]
    assert len(renderer.scenes) == 1
    visual = host.canvas.get_displayed_image(token)
    assert isinstance(visual, Composited)
    assert visual.source is original


@pytest.mark.asyncio
async def test_other_tokens_interleave_during_background_load() -> None:
    renderer = FakeRenderer()
    renderer.gate = asyncio.Event()
    host = make_host(renderer)
    waiting = place_token(host, "a")
    other = place_token(host, "b")
    host.squad.toggle(["a"])

    task = asyncio.create_task(host.squad.on_refresh_token(waiting))
    await asyncio.sleep(0)
    assert await host.squad.on_refresh_token(other) is Action.NOOP
    renderer.gate.set()
    assert await task is Action.APPLY


@pytest.mark.asyncio
async def test_apply_abandoned_when_unflagged_during_load() -> None:
    renderer = FakeRenderer()
    renderer.gate = asyncio.Event()
    host = make_host(renderer)
    token = place_token(host, "a")
    before = host.canvas.get_displayed_image(token)
    host.squad.toggle(["a"])

    task = asyncio.create_task(host.squad.on_refresh_token(token))
    await asyncio.sleep(0)
    host.squad.toggle(["a"])
    renderer.gate.set()

    assert await task is Action.NOOP
    assert host.canvas.get_displayed_image(token) is before
    assert renderer.scenes == []


@pytest.mark.asyncio
async def test_apply_abandoned_when_image_replaced_during_load() -> None:
    renderer = FakeRenderer()
    renderer.gate = asyncio.Event()
    host = make_host(renderer)
    token = place_token(host, "a")
    host.squad.toggle(["a"])

    task = asyncio.create_task(host.squad.on_refresh_token(token))
    await asyncio.sleep(0)
    replacement = Original(image=make_icon(12, 12))
    host.canvas.set_displayed_image(token, replacement)
    renderer.gate.set()

    assert await task is Action.NOOP
    assert host.canvas.get_displayed_image(token) is replacement
    assert await host.squad.on_refresh_token(token) is Action.APPLY
    visual = host.canvas.get_displayed_image(token)
    assert isinstance(visual, Composited) and visual.source is replacement


@pytest.mark.asyncio
async def test_apply_abandoned_when_token_removed_during_load() -> None:
    renderer = FakeRenderer()
    renderer.gate = asyncio.Event()
    host = make_host(renderer)
    token = place_token(host, "a")
    host.squad.toggle(["a"])

    task = asyncio.create_task(host.squad.on_refresh_token(token))
    await asyncio.sleep(0)
    host.canvas.remove_token(token)
    renderer.gate.set()

    assert await task is Action.NOOP
    assert renderer.scenes == []


@pytest.mark.asyncio
async def test_composite_of_composite_reverts_to_true_original() -> None:
    host = make_host()
    token = place_token(host, "a")
    original = host.canvas.get_displayed_image(token)
    inner = Composited(image=make_icon(49, 49), source=original)
    host.canvas.set_displayed_image(
        token, Composited(image=make_icon(172, 172), source=inner)
    )

    assert await host.squad.on_refresh_token(token) is Action.REVERT
    assert host.canvas.get_displayed_image(token) is original


@pytest.mark.asyncio
async def test_orphan_composite_is_treated_as_original() -> None:
    host = make_host()
    token = place_token(host, "a")
    orphan = Composited(image=make_icon(49, 49), source=None)
    host.canvas.set_displayed_image(token, orphan)

    assert await host.squad.on_refresh_token(token) is Action.NOOP
    visual = host.canvas.get_displayed_image(token)
    assert isinstance(visual, Original)
    assert visual.image is orphan.image


@pytest.mark.asyncio
async def test_revert_method_restores_original() -> None:
    host = make_host()
    token = place_token(host, "a")
    original = host.canvas.get_displayed_image(token)
    host.squad.toggle(["a"])
    await host.squad.on_refresh_token(token)
    assert await host.squad.compositor.revert(token)
    assert host.canvas.get_displayed_image(token) is original
    assert not await host.squad.compositor.revert(token)


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.asyncio
async def test_back_reference_never_compounds(seed: int) -> None:
    rng = random.Random(seed)
    host = make_host()
    tokens = [place_token(host, actor) for actor in ("a", "a", "b", "c")]
    originals = {t.id: host.canvas.get_displayed_image(t) for t in tokens}

    for _ in range(60):
        if rng.random() < 0.3:
            host.squad.toggle(rng.sample(["a", "b", "c"], rng.randint(1, 3)))
        else:
            await host.squad.on_refresh_token(rng.choice(tokens))

        for token in tokens:
            visual = host.canvas.get_displayed_image(token)
            if isinstance(visual, Composited):
                assert isinstance(visual.source, Original)
                assert visual.source is originals[token.id]
            else:
                assert visual is originals[token.id]
