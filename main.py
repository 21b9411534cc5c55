#!/usr/bin/env python3
"""批量筛查图片中的品牌 Logo 的主程序"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import numpy as np

from logo_decision import (
    ClassifierOutputEmbedding,
    EmbeddingVerifier,
    InvalidInput,
    LogoDecisionEngine,
    ScoreSource,
    load_centroids,
    load_config,
    load_labels,
)
from logo_decision.image_utils import ImageInput
from logo_decision.report import (
    format_classification,
    format_verification,
    reorganize_results,
    result_to_dict,
)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".webp"}


class PrecomputedScores(ScoreSource):
    """按图片文件名查表返回离线推理得到的概率向量"""

    def __init__(self, scores: Mapping[str, List[float]]) -> None:
        self._scores = dict(scores)

    def scores(self, image: ImageInput) -> np.ndarray:
        name = Path(str(image)).name
        if name not in self._scores:
            raise InvalidInput(f"没有找到图片的推理结果: {name}")
        return np.asarray(self._scores[name], dtype=np.float64)


def load_scores(scores_file: Path) -> Dict[str, List[float]]:
    with open(scores_file, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise InvalidInput(f"推理结果文件顶层必须是对象: {scores_file}")
    return data


def screen_images_in_folder(
    folder_path: Path,
    engine: LogoDecisionEngine,
    score_source: ScoreSource,
    verifier: Optional[EmbeddingVerifier] = None,
) -> dict:
    """批量筛查指定文件夹中的所有图片

    Args:
        folder_path: 图片文件夹路径
        engine: 决策引擎
        score_source: 提供每张图片概率向量的来源
        verifier: 可选的质心相似度校验器，仅对通过的图片执行

    Returns:
        图片名到结果字典的映射
    """
    if not folder_path.exists():
        print(f"❌ 文件夹不存在: {folder_path}")
        return {}

    image_files = sorted(
        path for path in folder_path.iterdir() if path.suffix.lower() in IMAGE_EXTENSIONS
    )
    if not image_files:
        print(f"⚠️  文件夹中没有找到图片文件: {folder_path}")
        return {}

    print(f"📁 找到 {len(image_files)} 张图片")
    print("=" * 80)

    embedding_source = ClassifierOutputEmbedding(score_source)
    all_results = {}
    for idx, image_file in enumerate(image_files, 1):
        print(f"\n[{idx}/{len(image_files)}] 分析: {image_file.name}")
        try:
            probabilities = score_source.scores(image_file)
            result = engine.classify(probabilities, image_file)
            record = result_to_dict(result)
            print(f"  {format_classification(result)}")

            if verifier is not None and result.accepted:
                verification = verifier.verify_image(image_file, embedding_source)
                record["verification"] = {"status": verification.status.value, "text": format_verification(verification)}
                print(f"  {format_verification(verification)}")

            all_results[image_file.name] = record
        except ValueError as e:
            print(f"  ❌ 分析失败: {str(e)}")
            all_results[image_file.name] = {"error": str(e)}

    return all_results


def save_results_to_json(results: dict, output_file: Path) -> None:
    organized_results = reorganize_results(results)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(organized_results, f, ensure_ascii=False, indent=2)
    print(f"💾 结果已保存到: {output_file}")


def print_summary(results: dict) -> None:
    summary = reorganize_results(results)["summary"]
    print("\n" + "=" * 80)
    print("📊 筛查摘要")
    print("=" * 80)
    print(f"\n总图片数: {summary['total']}")
    print(f"  - 识别为已知 Logo: {summary['accepted_count']}")
    print(f"  - 拒绝: {summary['rejected_count']}")
    print(f"  - 失败: {summary['failed_count']}")
    print("\n" + "=" * 80)


def main():
    """主函数"""
    script_dir = Path(__file__).parent

    # ==================== 配置参数 ====================
    IMAGES_FOLDER = script_dir / "test-images"
    SCORES_FILE = IMAGES_FOLDER / "scores.json"  # {图片文件名: [概率, ...]}
    CONFIG_FILE = script_dir / "logo_decision.yaml"  # 标签、质心和阈值
    DEBUG_LOGGING = False  # 打印决策引擎的调试日志
    # ===================================================

    logging.basicConfig(level=logging.DEBUG if DEBUG_LOGGING else logging.WARNING)

    config = load_config(CONFIG_FILE)
    if config.labels_path is None:
        print(f"❌ 配置中缺少 labels: {CONFIG_FILE}")
        return

    labels = load_labels(config.labels_path, sentinel=config.sentinel_label)
    engine = LogoDecisionEngine(labels, config.thresholds)
    verifier = None
    if config.centroids_path is not None:
        verifier = EmbeddingVerifier(load_centroids(config.centroids_path), config.similarity_threshold)

    print("\n" + "=" * 80)
    print("🖼️  Logo 批量筛查工具")
    print("=" * 80)
    print(f"📂 图片文件夹: {IMAGES_FOLDER}")
    print(f"🏷️  类别数: {len(labels)}")
    print(f"🔐 质心校验: {'开启' if verifier else '关闭'}\n")

    score_source = PrecomputedScores(load_scores(SCORES_FILE))
    results = screen_images_in_folder(IMAGES_FOLDER, engine, score_source, verifier)

    if results:
        print_summary(results)
        save_results_to_json(results, script_dir / "screening_results.json")

    print("\n✅ 程序执行完成!\n")


if __name__ == "__main__":
    main()
