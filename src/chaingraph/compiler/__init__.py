"""Chain-to-graph compiler: normalize, classify, build and index."""

from chaingraph.compiler.normalize import normalize
from chaingraph.compiler.classify import Classification, classify
from chaingraph.compiler.builder import build
from chaingraph.compiler.index import (
    DelegationSigner,
    InteractionIndex,
    KeySet,
    build_index,
)
from chaingraph.compiler.pipeline import ChainOrigin, CompiledChain, compile_chain

__all__ = [
    "normalize",
    "Classification",
    "classify",
    "build",
    "DelegationSigner",
    "InteractionIndex",
    "KeySet",
    "build_index",
    "ChainOrigin",
    "CompiledChain",
    "compile_chain",
]
