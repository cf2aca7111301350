# services package - 각 계산기는 생성자 주입으로 조립 (saju_engine.SajuEngine 참고)
