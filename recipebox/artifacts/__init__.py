"""Post-build artifact generation."""

from .post_build import PostBuildArtifactGenerator, create_post_build_generator


__all__ = ["PostBuildArtifactGenerator", "create_post_build_generator"]
