"""
Reactive Engine -- Component Registration Tests

The action table is built once from a ViewModel subclass and is read-only.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any, Optional

import pytest
from pydantic import BaseModel

from engine.reactive.component import ComponentInfo, action, classify
from engine.reactive.types import ParamKind
from engine.reactive.uploads import Upload
from engine.reactive.viewmodel import ViewModel


class Color(Enum):
    Red = 1
    Blue = 2


class Point(BaseModel):
    x: int
    y: int


class Base(ViewModel):
    value: int = 0

    @action
    def inherited(self):
        self.value += 1

    @action
    def hidden_later(self):
        pass


class Child(Base):
    label: str = ""

    @action(authenticated=True, roles=["admin"])
    def guarded(self, color: Color, point: Point, note: str):
        pass

    def hidden_later(self):
        pass


class TestClassify:
    @pytest.mark.parametrize(
        "annotation, kind",
        [
            (Upload, ParamKind.FILE),
            (list[Upload], ParamKind.FILE_LIST),
            (Sequence[Upload], ParamKind.FILE_LIST),
            (Upload | None, ParamKind.FILE),
            (Optional[Upload], ParamKind.FILE),
            (list[Upload] | None, ParamKind.FILE_LIST),
            (Color, ParamKind.ENUM),
            (Optional[Color], ParamKind.ENUM),
            (Color | None, ParamKind.ENUM),
            (Point, ParamKind.OBJECT),
            (dict[str, int], ParamKind.OBJECT),
            (list[int], ParamKind.OBJECT),
            (dict, ParamKind.OBJECT),
            (int, ParamKind.SCALAR),
            (str, ParamKind.SCALAR),
            (float | None, ParamKind.SCALAR),
            (Any, ParamKind.SCALAR),
        ],
    )
    def test_kinds(self, annotation, kind):
        assert classify(annotation) is kind


class TestComponentInfo:
    def test_actions_collected_with_inheritance(self):
        info = ComponentInfo.from_view_model(Child)
        assert set(info.actions) == {"inherited", "guarded"}

    def test_undecorated_override_hides_action(self):
        info = ComponentInfo.from_view_model(Child)
        assert "hidden_later" not in info.actions
        assert "hidden_later" in ComponentInfo.from_view_model(Base).actions

    def test_descriptor_metadata(self):
        descriptor = ComponentInfo.from_view_model(Child).actions["guarded"]
        assert descriptor.authenticated is True
        assert descriptor.roles == ("admin",)
        assert [p.name for p in descriptor.params] == ["color", "point", "note"]
        assert [p.kind for p in descriptor.params] == [ParamKind.ENUM, ParamKind.OBJECT, ParamKind.SCALAR]

    def test_default_name_and_override(self):
        assert ComponentInfo.from_view_model(Child).name == "Child"
        assert ComponentInfo.from_view_model(Child, name="child-box").name == "child-box"

    def test_action_table_read_only(self):
        info = ComponentInfo.from_view_model(Child)
        with pytest.raises(TypeError):
            info.actions["evil"] = info.actions["inherited"]

    def test_create_returns_defaults(self):
        vm = ComponentInfo.from_view_model(Child).create()
        assert isinstance(vm, Child)
        assert vm.snapshot() == {"value": 0, "label": ""}

    def test_rejects_non_viewmodel(self):
        with pytest.raises(TypeError):
            ComponentInfo.from_view_model(Point)

    def test_rejects_variadic_actions(self):
        class Variadic(ViewModel):
            @action
            def many(self, *values):
                pass

        with pytest.raises(ValueError, match="positional"):
            ComponentInfo.from_view_model(Variadic)

    def test_optional_uploads_register(self):
        class Attachments(ViewModel):
            @action
            def attach(self, avatar: Upload | None, files: list[Upload] | None, note: str):
                pass

        params = ComponentInfo.from_view_model(Attachments).actions["attach"].params
        assert [p.kind for p in params] == [ParamKind.FILE, ParamKind.FILE_LIST, ParamKind.SCALAR]
        assert [p.optional for p in params] == [True, True, False]
        assert params[0].adapter is None
        assert params[1].target == list[Upload]
