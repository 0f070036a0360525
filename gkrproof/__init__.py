"""Field arithmetic over GF((2^61-1)^2), Reed-Solomon FFT, Merkle trees and GKR sum-check proving."""

__version__ = "0.1.0"

__all__ = ["circuit", "fft", "field", "merkle", "polynomial", "sumcheck", "utility"]