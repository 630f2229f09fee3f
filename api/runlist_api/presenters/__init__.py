"""Presenters shaping store reads into API payloads."""

from .run_list import PaginationWindow, RunListPresenter, RunStore, shape_window

__all__ = ["PaginationWindow", "RunListPresenter", "RunStore", "shape_window"]
