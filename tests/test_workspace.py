from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

from conftest import make_image_bytes, testing_session_scope
from quotedesk import catalog, workspace
from quotedesk.constants import AssetKind, Portal
from quotedesk.imaging import EncodedImage
from quotedesk.workspace import Autosaver, PendingFile, ProgramDraft, normalize_and_upload_batch


def seeded_program(session: Session, portal: Portal = Portal.YL_GROUPS):
    catalog.restore_missing_programs(session, portal)
    session.commit()
    return catalog.fetch_programs(session, portal)[0]


def png_file(name: str, size: tuple[int, int] = (900, 300)) -> PendingFile:
    return PendingFile(data=make_image_bytes(size, "PNG"), content_type="image/png", filename=name)


def test_batch_upload_isolates_failures(media_root: Path) -> None:
    files = [
        png_file("one.png"),
        PendingFile(data=b"not an image", content_type="image/png", filename="broken.png"),
        png_file("two.png", (400, 400)),
    ]
    appended: list[str] = []

    outcome = asyncio.run(
        normalize_and_upload_batch(files, AssetKind.GALLERY, "programs/abc/gallery", appended.append)
    )

    assert outcome.failed == ["broken.png"]
    assert len(outcome.uploaded) == 2
    assert appended == outcome.uploaded
    for url in outcome.uploaded:
        assert url.startswith("/storage/programs/abc/gallery/")
        relative = url.removeprefix("/storage/")
        assert (media_root / relative).is_file()


def test_batch_results_follow_completion_order(monkeypatch: pytest.MonkeyPatch) -> None:
    async def fake_upload(encoded: EncodedImage, path_hint: str, filename=None) -> str:
        # The first file finishes last.
        await asyncio.sleep(0.2 if encoded.height == 300 else 0)
        return f"{path_hint}/{encoded.height}"

    monkeypatch.setattr(workspace.storage, "upload", fake_upload)
    files = [png_file("slow.png", (600, 300)), png_file("fast.png", (600, 100))]

    outcome = asyncio.run(normalize_and_upload_batch(files, AssetKind.GALLERY, "g"))

    assert outcome.uploaded == ["g/100", "g/300"]


def test_draft_limits_timetable_images(db_session: Session) -> None:
    draft = ProgramDraft(seeded_program(db_session))
    for index in range(5):
        draft.append_timetable(f"https://example.com/t{index}.png")

    assert not draft.can_add_timetables(1)
    with pytest.raises(ValueError):
        draft.append_timetable("https://example.com/t6.png")


def test_snapshot_is_detached_from_later_edits(db_session: Session) -> None:
    draft = ProgramDraft(seeded_program(db_session))
    draft.append_gallery("https://example.com/new.jpg")
    snapshot = draft.snapshot()

    draft.remove_gallery(0)
    draft.hero_image = "https://example.com/other-hero.jpg"

    assert "https://example.com/new.jpg" in snapshot.gallery_images
    assert snapshot.hero_image != draft.hero_image
    assert len(snapshot.gallery_images) == len(draft.gallery_images) + 1


def test_promote_persists_overrides(db_session: Session) -> None:
    program = seeded_program(db_session)
    draft = ProgramDraft(program)
    draft.banner_image = "https://example.com/banner.png"
    draft.append_gallery("https://example.com/extra.jpg")

    saved = draft.promote(db_session, Portal.YL_GROUPS)

    assert saved.id == program.id
    stored = catalog.program_from_row(catalog.get_program(db_session, program.id))
    assert stored.banner_image == "https://example.com/banner.png"
    assert stored.gallery_images[-1] == "https://example.com/extra.jpg"


def test_autosaver_reads_state_when_it_fires() -> None:
    state = {"title": "first"}
    saved: list[dict] = []

    async def scenario() -> None:
        saver = Autosaver(lambda: dict(state), saved.append, interval=0.01)
        saver.start()
        state["title"] = "second"
        await asyncio.sleep(0.1)
        await saver.stop()

    asyncio.run(scenario())

    assert saved
    assert saved[-1] == {"title": "second"}


def test_autosaver_survives_failing_saves() -> None:
    calls: list[int] = []

    def flaky_save(value: int) -> None:
        calls.append(value)
        if len(calls) == 1:
            raise RuntimeError("backend down")

    saver = Autosaver(lambda: 42, flaky_save, interval=60)
    asyncio.run(saver.flush())
    asyncio.run(saver.flush())

    assert calls == [42, 42]
    assert saver.saves == 1


def test_draft_autosaver_persists_latest_snapshot(db_session: Session) -> None:
    program = seeded_program(db_session)
    draft = ProgramDraft(program)
    saver = draft.autosaver(Portal.YL_GROUPS, session_factory=testing_session_scope)
    draft.hero_image = "https://example.com/autosaved-hero.jpg"

    asyncio.run(saver.flush())

    assert saver.saves == 1
    db_session.expire_all()
    stored = catalog.program_from_row(catalog.get_program(db_session, program.id))
    assert stored.hero_image == "https://example.com/autosaved-hero.jpg"
    assert draft.program.hero_image == "https://example.com/autosaved-hero.jpg"


def test_batch_failure_leaves_no_running_uploads(monkeypatch: pytest.MonkeyPatch) -> None:
    never = asyncio.Event()

    async def fake_upload(encoded: EncodedImage, path_hint: str, filename=None) -> str:
        if encoded.height == 100:
            raise RuntimeError("disk unavailable")
        await never.wait()
        return "unreachable"

    monkeypatch.setattr(workspace.storage, "upload", fake_upload)
    files = [png_file("stuck.png", (600, 300)), png_file("boom.png", (600, 100))]

    async def scenario() -> list[asyncio.Task]:
        with pytest.raises(RuntimeError):
            await normalize_and_upload_batch(files, AssetKind.GALLERY, "g")
        return [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]

    assert asyncio.run(scenario()) == []


def test_draft_keeps_missing_banner_unset(db_session: Session) -> None:
    program = seeded_program(db_session)
    program = catalog.save_program(
        db_session, program.model_copy(update={"banner_image": None}), Portal.YL_GROUPS
    )
    draft = ProgramDraft(program)
    draft.append_gallery("https://example.com/extra.jpg")

    assert draft.snapshot().banner_image is None
    draft.promote(db_session, Portal.YL_GROUPS)
    stored = catalog.program_from_row(catalog.get_program(db_session, program.id))
    assert stored.banner_image is None
