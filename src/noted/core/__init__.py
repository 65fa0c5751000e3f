"""Domain core: models, repositories, services and the pieces they share."""
