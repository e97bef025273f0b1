"""Core segmentation, grouping and transcript assembly modules.

WHY: The core package holds the parts of the pipeline that do not talk
to the network: cutting audio into segments, merging word tokens into
speaker utterances, and writing the transcript file.

HOW: ir.py defines the data structures, segmenter.py wraps ffprobe and
ffmpeg, grouper.py builds utterances from tokens, transcript.py writes
the header and utterance lines.

RULES:
- grouper.py is pure (no I/O) and is the semantic core of the package
- segmenter.py and transcript.py raise FileError subclasses, never bare OSError
"""
