"""Structural style model for Ansible playbooks."""

from __future__ import annotations

from . import builder as builder
from .builder import build_document as build_document
from .helpers import SourceText as SourceText
from .loaders import load_source as load_source
from .representation import *
