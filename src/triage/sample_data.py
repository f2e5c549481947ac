"""Small bundled dataset shown when the real one cannot be loaded."""

from __future__ import annotations

from triage.models import Paper, PaperTags, Rating


def sample_papers() -> list[Paper]:
    """Return fresh copies of the bundled sample papers."""
    return [
        Paper(
            id=1,
            title="Deep Learning Approaches for Automated Medical Image Analysis "
            "in Diabetic Retinopathy Detection",
            abstract="A convolutional architecture combining attention and residual "
            "connections detects diabetic retinopathy in 35,000 fundus images "
            "with 94.2% accuracy, with gradient-based interpretability analysis.",
            authors=["Dr. Sarah Johnson", "Prof. Michael Chen", "Dr. Lisa Wang"],
            keywords=["deep learning", "medical imaging", "diabetic retinopathy",
                      "computer vision"],
            year=2023,
            tags=PaperTags(computer_vision=True, industry_problem=True,
                           product_potential=True),
        ),
        Paper(
            id=2,
            title="Scalable Microservices Architecture for E-commerce Platforms",
            abstract="Experience report on moving a large e-commerce monolith to "
            "microservices with a custom service mesh, cutting latency by 40%.",
            authors=["John Smith", "Emily Rodriguez"],
            keywords=["microservices", "scalability", "e-commerce",
                      "distributed systems"],
            year=2023,
            is_industry=True,
            tags=PaperTags(industry_problem=True, product_potential=True),
        ),
        Paper(
            id=3,
            title="Quantum Error Correction Codes: Theoretical Advances and "
            "Implementation Challenges",
            abstract="A new class of topological codes tolerating error rates up "
            "to 2.1%, with proofs and simulation results.",
            authors=["Prof. Alice Quantum", "Dr. Bob Entanglement"],
            keywords=["quantum computing", "error correction", "surface codes"],
            year=2024,
        ),
        Paper(
            id=4,
            title="Real-time Object Detection and Tracking in Autonomous Vehicles "
            "Using Edge Computing",
            abstract="A YOLO-based detector and Kalman tracker reach sub-10ms "
            "inference on edge hardware across 100,000 test miles.",
            authors=["Dr. Tech Leader", "AI Engineer Smith"],
            keywords=["autonomous vehicles", "edge computing", "object detection",
                      "computer vision"],
            year=2024,
            is_industry=True,
            rating=Rating.INTERESTING,
            tags=PaperTags(computer_vision=True, industry_problem=True,
                           product_potential=True),
        ),
        Paper(
            id=5,
            title="Advanced Natural Language Processing for Legal Document Analysis",
            abstract="Transformer models combined with legal knowledge graphs "
            "extract contract clauses and cut manual review time by 70%.",
            authors=["Legal Tech Innovator", "NLP Research Scientist"],
            keywords=["natural language processing", "legal technology",
                      "document analysis"],
            year=2023,
            is_industry=True,
            rating=Rating.NOT_INTERESTING,
            tags=PaperTags(industry_problem=True, product_potential=True),
        ),
    ]
