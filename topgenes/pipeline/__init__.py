"""Top-expressed-genes pipeline entrypoints."""


def run_analysis(*args, **kwargs):
    from topgenes.pipeline.run import run_analysis as _run_analysis

    return _run_analysis(*args, **kwargs)


__all__ = ["run_analysis"]
