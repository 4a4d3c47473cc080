"""공통 유틸리티 (예외, 로깅, 변환, 시간)."""
