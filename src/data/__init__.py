# Sample buffer generation and persistence
from .sample_buffer import RandomSource, NumpyRandomSource, generate, default_source
from .buffer_store import save_results_h5, load_results_h5, load_summary_h5
