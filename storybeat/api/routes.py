from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from storybeat.api.convert import beat_view, build_character, build_instruction
from storybeat.api.deps import engine_dependency
from storybeat.api.models import CompileRequest, CompileResponse, TagsResponse
from storybeat.models import Character
from storybeat.opcodes.engine import RewriteEngine
from storybeat.opcodes.instruction import Instruction
from storybeat.opcodes.tags import Tag
from storybeat.scene import Scene

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/tags", response_model=TagsResponse)
async def list_tags_route() -> TagsResponse:
    return TagsResponse(tags=[t.value for t in Tag])


@router.post("/scenes/compile", response_model=CompileResponse)
async def compile_scene_route(
    payload: CompileRequest,
    engine: RewriteEngine = Depends(engine_dependency),
) -> CompileResponse:
    try:
        characters: dict[str, Character] = {}
        for spec in payload.characters:
            if spec.name in characters:
                raise ValueError(f"Duplicate character: {spec.name}")
            characters[spec.name] = build_character(spec)

        contents: list[Instruction | str] = [
            d if isinstance(d, str) else build_instruction(d, characters=characters) for d in payload.directives
        ]
        scene = Scene.build(
            payload.scene,
            contents,
            engine=engine,
            background_color=payload.background_color,
            foreground_color=payload.foreground_color,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e

    return CompileResponse(scene=scene.name, beats=[beat_view(b) for b in scene.beats])
