"""Translate validated feed payloads into domain documents."""

from __future__ import annotations

from nativedb.domain.model import ExampleDoc, NativeDoc, NativeParam

from .schema import NativeDocPayload


def parse_native_doc(raw: object) -> NativeDoc:
    """Validate one raw feed entry; raises ``pydantic.ValidationError`` (a ``ValueError``)."""

    payload = NativeDocPayload.model_validate(raw)
    return NativeDoc(
        name=payload.name,
        jhash=payload.jhash,
        comment=payload.comment,
        params=tuple(
            NativeParam(name=param.name, type=param.type, description=param.description)
            for param in payload.params
        ),
        results=payload.results,
        description=payload.description,
        examples=tuple(
            ExampleDoc(lang=example.lang.lower(), code=example.code.strip())
            for example in payload.examples
        ),
        apiset=payload.apiset,
        game=payload.game,
        build=payload.build,
    )
