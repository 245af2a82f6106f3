"""
color_search: Color-based product search for uploaded images.

Extracts dominant colors from a query image and ranks a product catalog
by a heuristic score that mixes RGB color distance with category
guesses drawn from the uploaded palette.

Modules:
    engine         Main SearchEngine class
    scoring        Similarity scoring and ranking
    colors         Color dicts, distance, synthetic catalog colors
    analyzer       Dominant color extraction (OpenCV k-means, vision API)
    preprocessing  Image normalization and downscaling
    catalog        CSV catalog loading and fallback products
    validation     Upload and image URL checks
"""

__version__ = "1.0.0"
