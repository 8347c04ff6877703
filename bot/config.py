"""
机器人配置

定义各阶段的打分权重与决策阈值
"""
from dataclasses import dataclass, field, fields

from .phase import GamePhase


@dataclass
class PhaseWeights:
    """
    单个阶段的打分权重

    Attributes:
        hand_score_weight: evaluate_hand 得分的权重
        straight_card_weight: 顺子中每张牌
        pine_card_weight: 连对中每张牌
        pair_weight / triple_weight / quad_weight: 每个对子/三张/四张
        single_weight: 每张散牌
        total_card_weight: 剩余总牌数
        use_two_penalty: 每打出一张 2 的惩罚
        use_bomb_penalty: 打出炸弹的惩罚
        use_high_card_penalty: 按出牌牌力线性惩罚
        finish_bonus: 出完手牌的奖励
        blocker_high_card_bonus: 有对手快出完时单张按牌力奖励
    """
    hand_score_weight: float = 1.0
    straight_card_weight: float = 0.5
    pine_card_weight: float = 0.7
    pair_weight: float = 0.6
    triple_weight: float = 0.8
    quad_weight: float = 1.0
    single_weight: float = -1.2
    total_card_weight: float = -0.3
    use_two_penalty: float = 4.0
    use_bomb_penalty: float = 3.0
    use_high_card_penalty: float = 0.4
    finish_bonus: float = 1000.0
    blocker_high_card_bonus: float = 0.0

    @classmethod
    def from_dict(cls, d: dict) -> 'PhaseWeights':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)


@dataclass
class BotTuning:
    """
    机器人调参

    Attributes:
        opening / mid / end: 各阶段权重
        pass_threshold: 跟牌时最佳得分低于 当前手牌得分 + 阈值 则过牌
        threat_threshold: 对手手牌数不超过该值视为威胁
        boss_bonus: 单张为 boss 牌时的加分
        lead_probability_weight: 拿回出牌权概率的加分系数
    """
    opening: PhaseWeights = field(default_factory=lambda: PhaseWeights(
        hand_score_weight=1.0,
        straight_card_weight=0.6,
        pine_card_weight=0.8,
        pair_weight=0.5,
        triple_weight=0.7,
        quad_weight=1.0,
        single_weight=-1.0,
        total_card_weight=-0.1,
        use_two_penalty=6.0,
        use_bomb_penalty=4.0,
        use_high_card_penalty=0.5,
    ))
    mid: PhaseWeights = field(default_factory=PhaseWeights)
    end: PhaseWeights = field(default_factory=lambda: PhaseWeights(
        hand_score_weight=1.2,
        straight_card_weight=0.3,
        pine_card_weight=0.4,
        pair_weight=0.4,
        triple_weight=0.5,
        quad_weight=0.6,
        single_weight=-1.5,
        total_card_weight=-1.5,
        use_two_penalty=0.7,
        use_bomb_penalty=1.0,
        use_high_card_penalty=0.2,
        blocker_high_card_bonus=0.8,
    ))
    pass_threshold: float = -10.0
    threat_threshold: int = 3
    boss_bonus: float = 50.0
    lead_probability_weight: float = 10.0

    def for_phase(self, phase: GamePhase) -> PhaseWeights:
        """返回阶段对应的权重"""
        if phase == GamePhase.OPENING:
            return self.opening
        if phase == GamePhase.END:
            return self.end
        return self.mid

    @classmethod
    def from_dict(cls, d: dict) -> 'BotTuning':
        kwargs = {}
        for f in fields(cls):
            if f.name not in d:
                continue
            value = d[f.name]
            if f.name in ("opening", "mid", "end") and isinstance(value, dict):
                value = PhaseWeights.from_dict(value)
            kwargs[f.name] = value
        return cls(**kwargs)


DEFAULT_TUNING = BotTuning()
