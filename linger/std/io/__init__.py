from .basic_io import BufferSink, StreamSink

__all__ = ['BufferSink', 'StreamSink']
