"""Instruction rewrite pipeline.

Directives built by scripts are lowered here, one tag at a time, into the
primitive instructions the playback layer steps through.
"""
