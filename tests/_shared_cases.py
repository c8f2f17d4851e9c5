"""Centralized header source cases used across lexer/parser/builder tests."""

from __future__ import annotations

from dataclasses import dataclass
import textwrap
from typing import Literal, cast


@dataclass(frozen=True, slots=True)
class HeaderCase:
    name: str
    source: str
    strict_should_parse_cleanly: bool = True
    permissive_should_parse_cleanly: bool = True


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


EXAMPLE_HEADER = """\
#pragma once

#include "CoreMinimal.h"
#include "Example.generated.h"

/// Kind of things.
UENUM(BlueprintType)
enum class EKind : uint8
{
    /// The first one.
    First,
    Second = 2,
};

DECLARE_DYNAMIC_DELEGATE_OneParam(FOnValue, int32, Value);
DECLARE_MULTICAST_DELEGATE_TwoParams(FOnPair, int32, const FString&);
DECLARE_DELEGATE_RetVal_OneParam(bool, FOnCheck, int32)

/// <summary>Example struct.</summary>
USTRUCT(BlueprintType)
struct EXAMPLE_API FExample : public FTableRowBase
{
    GENERATED_BODY()

    /// Speed in units.
    UPROPERTY(EditAnywhere, meta = (ClampMin = "0"))
    float Speed = 1.0f;

    UPROPERTY()
    TArray<FString> Names;

    int32 Slots[4];

    FExample();

private:
    UPROPERTY()
    int32 Hidden;
};

/// A component.
UCLASS(Blueprintable, meta = (DisplayName = "Example Component"))
class EXAMPLE_API UExampleComponent : public UActorComponent
{
    GENERATED_BODY()

public:
    UExampleComponent();

    /// <summary>Computes things.</summary>
    /// <param name="Input">The input.</param>
    /// <returns>The result.</returns>
    UFUNCTION(BlueprintCallable, Category = "Example")
    float Compute(const FVector& Input, int32 Count = 1) const;

    virtual void BeginPlay() override;

    static UExampleComponent* Get();

    //// [inject: FExample, EKind]

protected:
    UPROPERTY()
    int32 Guarded;

private:
    void Secret();
};

EXAMPLE_API int32 FreeHelper(int32 Value);

//// [snippet: example]
    auto X = 1;
      auto Y = 2;
//// [/snippet]

//// [proxy: core, math]
/// Adds two numbers.
//// UFUNCTION(BlueprintPure)
//// int32 Add(int32 A, int32 B);
//// [/proxy]
"""


PARSER_CASES: tuple[HeaderCase, ...] = (
    HeaderCase(name="example_header", source=EXAMPLE_HEADER),
    HeaderCase(name="empty_header", source=""),
    HeaderCase(
        name="preprocessor_and_comments_only",
        source=_dedent(
            """
            #pragma once
            // A plain comment.
            /* A block
               comment. */
            #define EXAMPLE_MACRO(X) \\
                (X + 1)
            """
        ),
    ),
    HeaderCase(
        name="enum_with_values_and_docs",
        source=_dedent(
            """
            UENUM(BlueprintType)
            enum class EMode : uint8
            {
                /// Off.
                Off = 0 UMETA(DisplayName = "Off"),
                On,
            };
            """
        ),
    ),
    HeaderCase(
        name="plain_enum_without_macro",
        source=_dedent(
            """
            enum EPlain
            {
                A,
                B
            };
            """
        ),
    ),
    HeaderCase(
        name="struct_with_properties",
        source=_dedent(
            """
            USTRUCT()
            struct FData
            {
                GENERATED_BODY()

                UPROPERTY(EditAnywhere)
                TMap<FName, TArray<int32>> Lookup;

                UPROPERTY()
                static const int32 Limit = 8;

                bool bFlag : 1;
            };
            """
        ),
    ),
    HeaderCase(
        name="template_struct",
        source=_dedent(
            """
            template <typename T>
            struct TBox
            {
                T Value;
            };
            """
        ),
    ),
    HeaderCase(
        name="class_with_visibility_labels",
        source=_dedent(
            """
            UCLASS()
            class UThing : public UObject, public IInterface
            {
                GENERATED_BODY()
            public:
                UFUNCTION()
                void Run();
            protected:
                int32 Count;
            private:
                FString Name;
            };
            """
        ),
    ),
    HeaderCase(
        name="delegate_forms",
        source=_dedent(
            """
            DECLARE_DELEGATE(FOnDone);
            DECLARE_DYNAMIC_MULTICAST_DELEGATE_TwoParams(FOnHit, AActor*, Actor, float, Damage);
            UDELEGATE(BlueprintAuthorityOnly)
            DECLARE_DYNAMIC_DELEGATE_RetVal_OneParam(bool, FOnQuery, int32, Index);
            """
        ),
    ),
    HeaderCase(
        name="function_with_inline_body_and_snippet",
        source=_dedent(
            """
            UCLASS()
            class UFoo : public UObject
            {
                GENERATED_BODY()
            public:
                UFUNCTION()
                int32 Value() const
                {
                    //// [snippet: value]
                    return 1;
                    //// [/snippet]
                    return 1;
                }
            };
            """
        ),
    ),
    HeaderCase(
        name="namespace_wrapped_declarations",
        source=_dedent(
            """
            namespace Example
            {
            UENUM()
            enum class EKind : uint8 { A, B };
            }
            """
        ),
    ),
    HeaderCase(
        name="forward_declarations_and_aliases_are_junk",
        source=_dedent(
            """
            class UObject;
            struct FBar;
            using FAlias = int32;
            typedef int32 FInt;
            """
        ),
    ),
    HeaderCase(
        name="unknown_directive_is_only_a_warning",
        source=_dedent(
            """
            //// [unknown: x]
            UENUM()
            enum class EKind : uint8 { A };
            """
        ),
    ),
    HeaderCase(
        name="edge_case_extraneous_closing_brace_fails_in_strict_mode",
        source=_dedent(
            """
            UENUM()
            enum class EKind : uint8 { A };
            }
            """
        ),
        strict_should_parse_cleanly=False,
    ),
    HeaderCase(
        name="edge_case_missing_closing_brace_fails_in_strict_mode",
        source=_dedent(
            """
            namespace Example {
            UENUM()
            enum class EKind : uint8 { A };
            """
        ),
        strict_should_parse_cleanly=False,
    ),
    HeaderCase(
        name="edge_case_reflected_property_without_name_fails",
        source=_dedent(
            """
            UPROPERTY(EditAnywhere)
            float;
            """
        ),
        strict_should_parse_cleanly=False,
        permissive_should_parse_cleanly=False,
    ),
    HeaderCase(
        name="edge_case_unterminated_snippet_fails",
        source=_dedent(
            """
            //// [snippet: broken]
            int32 X;
            """
        ),
        strict_should_parse_cleanly=False,
        permissive_should_parse_cleanly=False,
    ),
)

type CaseName = Literal[
    "example_header",
    "empty_header",
    "preprocessor_and_comments_only",
    "enum_with_values_and_docs",
    "plain_enum_without_macro",
    "struct_with_properties",
    "template_struct",
    "class_with_visibility_labels",
    "delegate_forms",
    "function_with_inline_body_and_snippet",
    "namespace_wrapped_declarations",
    "forward_declarations_and_aliases_are_junk",
    "unknown_directive_is_only_a_warning",
    "edge_case_extraneous_closing_brace_fails_in_strict_mode",
    "edge_case_missing_closing_brace_fails_in_strict_mode",
    "edge_case_reflected_property_without_name_fails",
    "edge_case_unterminated_snippet_fails",
]

CASE_BY_NAME: dict[CaseName, HeaderCase] = cast(
    dict[CaseName, HeaderCase],
    {case.name: case for case in PARSER_CASES},
)


def case_source(name: CaseName) -> str:
    return CASE_BY_NAME[name].source


def case_id(case: HeaderCase) -> str:
    return case.name
